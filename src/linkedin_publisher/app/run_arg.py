import sys

from enum import Enum, unique
from typing import Any, Optional
from .paths import Paths


@unique
class RunArg(str, Enum):
    def __new__(cls, value: str, alias: str = None, kind: str = 'str',
                optional: bool = False, path: bool = False, default_value: Any = None):
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.__alias = alias
        obj.__type = kind
        obj.__optional = optional
        obj.__path = path
        obj.__default_value = default_value
        return obj

    @property
    def alias(self) -> str:
        return self.__alias

    @property
    def type(self) -> str:
        return self.__type

    @property
    def is_optional(self) -> bool:
        return self.__optional

    @property
    def is_path(self) -> bool:
        return self.__path

    @property
    def default_value(self) -> Any:
        return self.__default_value

    PORT = ('port', 'p', 'int', True)
    MANUAL = ('manual', 'm', 'bool', True, False, False)
    FORMAT = ('format', 'f', 'str', True)
    LIMIT = ('limit', 'n', 'int', True, False, 10)
    TEXT = ('text', 't', 'str')
    IMAGE = ('image', 'i', 'str', True)
    VISIBILITY = ('visibility', 'vis', 'str', True, False, 'PUBLIC')
    ARTICLE_URL = ('article-url', 'u', 'str', True)
    ARTICLE_TITLE = ('article-title', None, 'str', True)
    ARTICLE_DESCRIPTION = ('article-description', None, 'str', True)
    ENV_FILE = ('env-file', 'e', 'str', True, True)
    VERBOSE = ('verbose', 'v', 'bool', True, False, False)
    HELP = ('help', 'h', 'bool', True, False, False)

    def get_from(self, run_args: dict['RunArg', Any]) -> Any:
        value = run_args.get(self)
        return self.default_value if value is None else value

    @staticmethod
    def of(key: str) -> 'RunArg':
        for run_arg in RunArg:
            if run_arg.value == key or run_arg.alias == key:
                return run_arg
        raise ValueError(f"Unknown option: {key}")

    @staticmethod
    def parse(source: Optional[list[str]] = None) -> tuple[dict['RunArg', Any], list[str]]:
        """
        Split command line tokens into options and positional arguments.

        Options take the next token as their value (or ``--option=value``), except
        bool options which are set by their presence alone.

        Returns:
            Tuple of (options, positional arguments)
        """
        if source is None:
            source = sys.argv[1:]

        target: dict[RunArg, Any] = {}
        positionals: list[str] = []

        idx = 0
        while idx < len(source):
            arg = source[idx]
            idx += 1

            if arg == '--':
                positionals.extend(source[idx:])
                break

            if arg.startswith('--'):
                key = arg[2:]
            elif arg.startswith('-') and len(arg) > 1:
                key = arg[1:]
            else:
                positionals.append(arg)
                continue

            val = None
            if '=' in key:
                key, val = key.split('=', 1)

            run_arg = RunArg.of(key)

            if run_arg.type == 'bool':
                if val is None and idx < len(source) and source[idx].lower() in ('true', 'false'):
                    val = source[idx]
                    idx += 1
                target[run_arg] = RunArg._parse(run_arg, 'true' if val is None else val)
                continue

            if val is None:
                if idx >= len(source):
                    raise ValueError(f"Run option: '{run_arg.value}' requires a value")
                val = source[idx]
                idx += 1

            target[run_arg] = RunArg._parse(run_arg, val)

        return target, positionals

    @staticmethod
    def _parse(run_arg: 'RunArg', value: str) -> Any:
        if value is None or value == '':
            return run_arg.default_value
        if run_arg.type == "bool":
            return str(value).lower() in ('true', '1', 'yes')
        if run_arg.type == "int":
            try:
                return int(value)
            except ValueError:
                raise ValueError(f"Run option: '{run_arg.value}' must be a number, got: {value}")
        if run_arg.is_path:
            value = Paths.get_path(value) if run_arg.is_optional else (
                Paths.require_path(value, f"Run option: '{run_arg.value}' is required."))
        return value
