#!/usr/bin/env python3
"""
Tests for the command-line entry points of catalog_server.py and catalog_client.py.

Run with:
    python -m pytest tests/test_cli.py
"""
import io
import os
import sys
import unittest
from unittest.mock import patch

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import catalog_client
import catalog_server
from app.models import GameRecord
from app.repositories import DEFAULT_GAMES
from catalog_client import CatalogAPIClient, CatalogTransportError

GAMES = [GameRecord.from_dict(g) for g in DEFAULT_GAMES]


def _run_main(module, argv, env=None):
    buf = io.StringIO()
    with patch.object(sys, 'argv', argv), patch('sys.stdout', buf), \
            patch.dict(os.environ, env or {}, clear=True):
        module.main()
    return buf.getvalue()


class TestServerMain(unittest.TestCase):

    def tearDown(self):
        catalog_server.init_catalog()

    def test_runs_app_with_configured_port(self):
        with patch.object(catalog_server.app, 'run') as run:
            out = _run_main(catalog_server, ['catalog-server', '--port', '5055'])
        run.assert_called_once_with(host='127.0.0.1', port=5055, debug=False)
        self.assertIn('http://localhost:5055/api/games', out)
        self.assertIn('search=zelda', out)

    def test_bad_data_file_exits(self):
        with patch.object(catalog_server.app, 'run') as run:
            with self.assertRaises(SystemExit) as ctx:
                _run_main(catalog_server, ['catalog-server', '--data-file', '/nonexistent.json'])
        self.assertEqual(ctx.exception.code, 1)
        run.assert_not_called()

    def test_missing_config_file_exits(self):
        with patch.object(catalog_server.app, 'run'):
            with self.assertRaises(SystemExit):
                _run_main(catalog_server, ['catalog-server', '--config', '/nonexistent.json'])

    def test_explicit_port_zero_is_kept(self):
        with patch.object(catalog_server.app, 'run') as run:
            _run_main(catalog_server, ['catalog-server', '--port', '0'], env={'PORT': '7000'})
        self.assertEqual(run.call_args.kwargs['port'], 0)

    def test_env_port_used_without_flag(self):
        with patch.object(catalog_server.app, 'run') as run:
            _run_main(catalog_server, ['catalog-server'], env={'PORT': '7000'})
        self.assertEqual(run.call_args.kwargs['port'], 7000)


class TestClientMain(unittest.TestCase):

    def test_one_shot_search_prints_results(self):
        with patch.object(CatalogAPIClient, 'list_games', return_value=GAMES[2:3]) as lg:
            out = _run_main(catalog_client, ['catalog-client', '--search', 'witcher'])
        lg.assert_called_once_with('witcher')
        self.assertIn('Loading games...', out)
        self.assertIn('Found 1 game(s)', out)
        self.assertIn('The Witcher 3: Wild Hunt', out)

    def test_one_shot_failure_exits_non_zero(self):
        with patch.object(CatalogAPIClient, 'list_games',
                          side_effect=CatalogTransportError('Connection refused')):
            with self.assertRaises(SystemExit) as ctx:
                _run_main(catalog_client, ['catalog-client', '--search', 'x'])
        self.assertEqual(ctx.exception.code, 1)

    def test_health(self):
        with patch.object(CatalogAPIClient, 'health', return_value={'status': 'API is running'}):
            out = _run_main(catalog_client, ['catalog-client', '--health'])
        self.assertIn('API is running', out)

    def test_log_level_comes_from_environment(self):
        with patch.object(CatalogAPIClient, 'health', return_value={'status': 'API is running'}), \
                patch.object(catalog_client, 'setup_logging') as setup:
            _run_main(catalog_client, ['catalog-client', '--health'],
                      env={'CATALOG_LOG_LEVEL': 'DEBUG'})
        setup.assert_called_once_with('DEBUG')

    def test_log_level_flag_wins(self):
        with patch.object(CatalogAPIClient, 'health', return_value={'status': 'API is running'}), \
                patch.object(catalog_client, 'setup_logging') as setup:
            _run_main(catalog_client, ['catalog-client', '--health', '--log-level', 'ERROR'],
                      env={'CATALOG_LOG_LEVEL': 'DEBUG'})
        setup.assert_called_once_with('ERROR')

    def test_explicit_timeout_zero_is_kept(self):
        with patch.object(catalog_client, 'CatalogAPIClient') as client_cls:
            client_cls.return_value.health.return_value = {'status': 'API is running'}
            _run_main(catalog_client, ['catalog-client', '--health', '--timeout', '0'],
                      env={'CATALOG_TIMEOUT': '30'})
        self.assertEqual(client_cls.call_args.kwargs['timeout'], 0.0)

    def test_interactive_commands(self):
        answers = iter(['hades', ':clear', ':quit'])
        with patch.object(CatalogAPIClient, 'list_games', return_value=GAMES) as lg, \
                patch('builtins.input', lambda prompt='': next(answers)):
            out = _run_main(catalog_client, ['catalog-client'])
        self.assertEqual([c.args for c in lg.call_args_list], [(None,), ('hades',), (None,)])
        self.assertIn('Happy gaming', out)

    def test_interactive_stops_on_eof(self):
        def _eof(prompt=''):
            raise EOFError
        with patch.object(CatalogAPIClient, 'list_games', return_value=[]), \
                patch('builtins.input', _eof):
            out = _run_main(catalog_client, ['catalog-client'])
        self.assertIn('No games found matching your search.', out)


if __name__ == '__main__':
    unittest.main()
