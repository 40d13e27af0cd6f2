import unittest

from linkedin_publisher.app.run_arg import RunArg


class RunArgTest(unittest.TestCase):
    def test_parse_positionals_and_options(self):
        run_args, positionals = RunArg.parse(['posts', 'create', '--text', 'Hello', '--visibility', 'CONNECTIONS'])
        self.assertEqual(positionals, ['posts', 'create'])
        self.assertEqual(run_args, {RunArg.TEXT: 'Hello', RunArg.VISIBILITY: 'CONNECTIONS'})

    def test_parse_alias_and_equals(self):
        run_args, positionals = RunArg.parse(['posts', 'list', '-n', '5', '--format=json'])
        self.assertEqual(positionals, ['posts', 'list'])
        self.assertEqual(RunArg.LIMIT.get_from(run_args), 5)
        self.assertEqual(RunArg.FORMAT.get_from(run_args), 'json')

    def test_parse_bool_flag(self):
        run_args, positionals = RunArg.parse(['auth', 'login', '--manual', '--port', '5000'])
        self.assertEqual(positionals, ['auth', 'login'])
        self.assertIs(RunArg.MANUAL.get_from(run_args), True)
        self.assertEqual(RunArg.PORT.get_from(run_args), 5000)

    def test_parse_bool_flag_with_value(self):
        run_args, _ = RunArg.parse(['--verbose', 'false', 'profile'])
        self.assertIs(RunArg.VERBOSE.get_from(run_args), False)

    def test_defaults(self):
        run_args, _ = RunArg.parse(['posts', 'list'])
        self.assertEqual(RunArg.LIMIT.get_from(run_args), 10)
        self.assertEqual(RunArg.VISIBILITY.get_from(run_args), 'PUBLIC')
        self.assertIs(RunArg.MANUAL.get_from(run_args), False)
        self.assertIsNone(RunArg.PORT.get_from(run_args))

    def test_double_dash_ends_options(self):
        run_args, positionals = RunArg.parse(['posts', 'delete', '--', '-urn'])
        self.assertEqual(run_args, {})
        self.assertEqual(positionals, ['posts', 'delete', '-urn'])

    def test_unknown_option(self):
        with self.assertRaises(ValueError):
            RunArg.parse(['--colour', 'blue'])

    def test_missing_value(self):
        with self.assertRaises(ValueError):
            RunArg.parse(['posts', 'create', '--text'])

    def test_invalid_number(self):
        with self.assertRaises(ValueError):
            RunArg.parse(['posts', 'list', '--limit', 'many'])

    def test_of(self):
        self.assertEqual(RunArg.of('article-url'), RunArg.ARTICLE_URL)
        self.assertEqual(RunArg.of('u'), RunArg.ARTICLE_URL)


if __name__ == '__main__':
    unittest.main()
