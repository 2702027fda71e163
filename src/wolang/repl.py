"""Interactive REPL for wolang, powered by prompt_toolkit."""

from __future__ import annotations

import re

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .errors import LexError, WolangSyntaxError
from .lexer_rd import tokenize
from .repl_highlight import WolangLexer
from .runner import render, report_error
from .token_types import TT

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/tokens": ("Toggle printing tokens instead of the tree", "[on|off]"),
    "/json": ("Toggle printing JSON instead of the tree", "[on|off]"),
}

_ON = ("on", "1", "true", "yes")
_OFF = ("off", "0", "false", "no")


def _is_block_header(line: str) -> bool:
    """Return True if *line* is a bare repeat header such as ``3x``."""
    try:
        tokens = tokenize(line.strip())
    except LexError:
        return False

    sig = [tok.type for tok in tokens if tok.type not in (TT.NEWLINE, TT.INDENT, TT.DEDENT)]
    return sig == [TT.INT, TT.REPEAT]


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display=f"{cmd} {hint}".rstrip(),
                    display_meta=desc,
                )


def _handle_slash(line: str, state: dict) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1].lower() if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd in ("/tokens", "/json"):
        mode = cmd[1:]
        if arg in _ON:
            state["mode"] = mode
        elif arg in _OFF:
            state["mode"] = "tree"
        elif arg == "":
            # Toggle.
            state["mode"] = "tree" if state["mode"] == mode else mode
        else:
            print(f"Usage: {cmd} [on|off]")
            return True

        print(f"Output: {state['mode']}")
        return True

    print(f"Unknown command: {cmd}")
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def _compute_indent(text: str) -> str:
    """Compute the auto-indent prefix for the next continuation line."""
    last = text.split("\n")[-1]
    existing = len(last) - len(last.lstrip(" "))

    if _is_block_header(last):
        return " " * (existing + 2)

    # Preserve indent of the last line.
    if last.strip():
        return " " * existing

    return ""


def repl() -> None:
    """Interactive read-parse-print loop with prompt_toolkit."""
    state = {"mode": "tree"}

    bindings = KeyBindings()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer
        text = buf.text

        # Single line that doesn't open a block => accept.
        if "\n" not in text:
            if _is_block_header(text):
                buf.insert_text("\n" + _compute_indent(text))
                return

            buf.validate_and_handle()
            return

        # Multiline: an empty last line submits.
        lines = text.split("\n")
        if lines[-1].strip() == "":
            buf.text = "\n".join(lines[:-1])
            buf.cursor_position = len(buf.text)
            buf.validate_and_handle()
            return

        buf.insert_text("\n" + _compute_indent(text))

    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=WolangLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation="... ",
    )

    print("wolang repl: Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt(">>> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if _handle_slash(text, state):
            continue

        try:
            print(render(text, state["mode"]))
        except WolangSyntaxError as exc:
            report_error(exc)
