from typing import Annotated

import pytest

import cliobj
from cliobj import Arg
from cliobj.options import options


@pytest.fixture
def main(mocker):
    return mocker.MagicMock(return_value=None)


def test_run_success(my_args, main, console, error_console):
    code = cliobj.run(my_args, main, ["/H", "Hi"], console=console, error_console=error_console)
    assert code == 0
    main.assert_called_once_with(my_args)
    assert my_args.hello == "Hi"


def test_run_instantiates_class(my_args, main, console, error_console):
    code = cliobj.run(type(my_args), main, ["Hi"], console=console, error_console=error_console)
    assert code == 0
    (target,), _ = main.call_args
    assert isinstance(target, type(my_args))
    assert target is not my_args
    assert target.hello == "Hi"


def test_run_defaults_to_argv(mocker, my_args, main, console, error_console):
    mocker.patch("sys.argv", ["prog", "/G", "Bye"])
    assert cliobj.run(type(my_args), main, console=console, error_console=error_console) == 0
    (target,), _ = main.call_args
    assert target.goodbye == "Bye"


def test_run_help(my_args, main, console, error_console):
    with console.capture() as capture:
        code = cliobj.run(my_args, main, ["/?"], console=console, error_console=error_console, width=70)
    assert code == 0
    main.assert_not_called()
    out = capture.get()
    assert out.startswith("Command-line options.\nTest application.\nUsage: TESTAPP")
    assert "Displays command-line usage information." in out


def test_run_invalid(my_args, main, console, error_console):
    with console.capture() as capture:
        code = cliobj.run(my_args, main, ["/NumberOfScoops", "9"], console=console, error_console=error_console)
    assert code == 2
    main.assert_not_called()
    assert capture.get().startswith("ERROR: The field NumberOfScoops must be >= 1 and <= 3.\n")


def test_run_ambiguous(my_args, main, console, error_console):
    with error_console.capture() as capture:
        code = cliobj.run(my_args, main, ["/Samp", "red"], console=console, error_console=error_console)
    assert code == 2
    main.assert_not_called()
    out = capture.get()
    assert "╭─ Error" in out
    assert "'Samp'" in out


def test_run_main_raises(my_args, console, error_console):
    def main(settings):
        raise RuntimeError("Something broke.")

    with error_console.capture() as capture:
        code = cliobj.run(my_args, main, [], console=console, error_console=error_console)
    assert code == 1
    assert "Something broke." in capture.get()


def test_run_async_main(my_args, console, error_console):
    seen = []

    async def main(settings):
        seen.append(settings.hello)

    assert cliobj.run(my_args, main, ["/H", "Hi"], console=console, error_console=error_console) == 0
    assert seen == ["Hi"]


def test_run_default_error_console(my_args, main, console):
    assert cliobj.run(my_args, main, ["/H", "x"], console=console) == 0


def test_run_prefix_option(main, console, error_console):
    @options(prefix="--")
    class Args:
        name: Annotated[str, Arg(name="Name")] = ""

    args = Args()
    assert cliobj.run(args, main, ["--Name", "x", "/ignored"], console=console, error_console=error_console) == 0
    assert args.name == "x"
