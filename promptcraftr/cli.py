from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from promptcraftr.agent.wizard import ASSISTANT, PromptWizard
from promptcraftr.utils.core import load_app_config, open_session_store
from promptcraftr.utils.render import progress_table, to_console_text

console = Console()

QUIT_COMMANDS = ("/quit", "/exit")


def print_message(message) -> None:
    if message.role == ASSISTANT:
        console.print(Panel(to_console_text(message.text), title="assistant", title_align="left", border_style="magenta"))
    else:
        console.print(Text.assemble(("you> ", "bold blue"), to_console_text(message.text)))


def print_compiled(text: str) -> None:
    console.print(Panel(Text(text), title="Final Compiled Prompt", border_style="green"))


def run(wizard: PromptWizard, read_line=None) -> None:
    """
    Run the terminal chat until EOF or /quit.

    Besides the wizard commands, /progress prints the step checklist and
    /wipe clears stored state.
    """
    read_line = read_line or (lambda: console.input("[bold blue]> [/bold blue]"))
    for message in wizard.messages:
        print_message(message)

    while True:
        try:
            line = read_line()
        except (EOFError, KeyboardInterrupt):
            console.print()
            break

        text = (line or "").strip()
        if not text:
            continue
        if text in QUIT_COMMANDS:
            break
        if text == "/progress":
            console.print(progress_table(wizard.progress()))
            continue
        if text == "/wipe":
            wizard.wipe()
            console.print("[bold yellow]Session storage cleared.[/bold yellow]")
            for message in wizard.messages:
                print_message(message)
            continue

        seen = len(wizard.messages)
        compiled = wizard.send(text)
        # /reset replaces the log, so print everything when it shrank
        new_messages = wizard.messages[seen:] if len(wizard.messages) > seen else wizard.messages
        for message in new_messages:
            if message.role == ASSISTANT:
                print_message(message)
        if compiled is not None:
            print_compiled(compiled)


def main():
    config = load_app_config()
    store = open_session_store(config)
    run(PromptWizard(store).load())


if __name__ == "__main__":
    main()
