import os
import tempfile
import unittest
from contextlib import redirect_stdout
from io import StringIO
from pathlib import Path

from structlog.testing import capture_logs

from wirebind.cli import main
from wirebind.code_gen import load_module

SCHEMA = str(Path(__file__).parent.parent / 'schema' / 'fixtures' / 'example_schema.yml')
UNRESOLVED_SCHEMA = str(Path(__file__).parent.parent / 'schema' / 'fixtures' / 'unresolved_schema.yml')
NO_TYPE_CHECKS_SETTINGS = str(Path(__file__).parent.parent / 'others' / 'fixtures' / 'no_type_checks_settings.yml')


class CliMainTest(unittest.TestCase):
    def _execute(self, argv: list[str]) -> tuple[int, str]:
        f = StringIO()
        with capture_logs():
            with redirect_stdout(f):
                code = main.CliManager().execute_from_command_line(argv)
        return code, f.getvalue()

    def test_init(self):
        # basically making sure importing works
        cli = main.CliManager()

        f = StringIO()
        with capture_logs():
            with redirect_stdout(f):
                cli.help()
        output = f.getvalue().strip().splitlines()

        self.assertTrue(len(output) >= 3)
        self.assertIn('generate', f.getvalue())
        self.assertIn('check', f.getvalue())

    def test_no_command_prints_help(self):
        code, output = self._execute([])
        self.assertEqual(code, 0)
        self.assertIn('Available subcommands:', output)

    def test_unknown_command(self):
        code, output = self._execute(['nope'])
        self.assertEqual(code, -1)
        self.assertIn('Unknown command: "nope"', output)

    def test_help(self):
        f = StringIO()
        with self.assertRaises(SystemExit) as cm:
            with capture_logs():
                with redirect_stdout(f):
                    main.CliManager().execute_from_command_line(['generate', '--help'])

        self.assertEqual(cm.exception.args[0], 0)
        self.assertIn('--no-type-checks', f.getvalue())

    def test_generate_to_stdout(self):
        code, output = self._execute(['generate', SCHEMA, '--disable-logs'])
        self.assertEqual(code, 0)
        module = load_module(output)
        self.assertEqual(module.serialize('Pair', {'a': 5, 'b': 300}), bytes.fromhex('05ac02'))
        self.assertTrue(hasattr(module, 'is_PAIR'))

    def test_generate_to_file(self):
        with tempfile.TemporaryDirectory() as directory:
            out = os.path.join(directory, 'bindings.py')
            code, output = self._execute(['generate', SCHEMA, '-o', out, '--no-type-checks'])
            self.assertEqual(code, 0)
            self.assertEqual(output, '')
            with open(out, encoding='utf-8') as f:
                module = load_module(f.read())
        self.assertFalse(hasattr(module, 'is_PAIR'))
        self.assertEqual(module.deserialize('Choice', b'\x01\x07'), {'tag': 'B', 'value': [7]})

    def test_generate_with_config_yaml(self):
        code, output = self._execute(['generate', SCHEMA, '--config-yaml', NO_TYPE_CHECKS_SETTINGS])
        self.assertEqual(code, 0)
        self.assertNotIn('def is_PAIR(', output)

    def test_check(self):
        code, output = self._execute(['check', SCHEMA])
        self.assertEqual(code, 0)
        self.assertIn('6 container(s) ok', output)
        self.assertIn('Shape (enum) -> SHAPE', output)

    def test_check_invalid_schema(self):
        from wirebind.exception import UnresolvedReferenceError
        with self.assertRaises(UnresolvedReferenceError):
            self._execute(['check', UNRESOLVED_SCHEMA])

    def test_main_exit_codes(self):
        import sys
        argv = sys.argv
        try:
            sys.argv = ['wirebind-cli', 'check', UNRESOLVED_SCHEMA]
            with self.assertRaises(SystemExit) as cm:
                with capture_logs():
                    main.main()
            self.assertEqual(cm.exception.args[0], 1)

            sys.argv = ['wirebind-cli', 'check', SCHEMA]
            with self.assertRaises(SystemExit) as cm:
                with capture_logs():
                    with redirect_stdout(StringIO()):
                        main.main()
            self.assertEqual(cm.exception.args[0], 0)
        finally:
            sys.argv = argv
