import pytest

from main import build_parser, main


def test_global_flags_and_subcommand_options():
    args = build_parser().parse_args(['-d', '-v', '--project-root', 'site', 'normalize-links', '--no-forward-refs'])

    assert args.dry_run and args.verbose
    assert args.project_root == 'site'
    assert args.command == 'normalize-links'
    assert args.allow_forward is False


def test_a_command_is_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_configuration_errors_exit_non_zero(tmp_path, capsys):
    code = main(['--project-root', str(tmp_path), 'build-banner'])

    assert code == 1
    assert '❌' in capsys.readouterr().out


def test_successful_command_exits_zero(tmp_path, make_tree):
    make_tree(tmp_path, {'src/pages/index.md': '# Home\n'})

    assert main(['--project-root', str(tmp_path), 'check-links', '--no-external']) == 0
