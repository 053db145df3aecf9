from typing import Dict, List, Tuple

import gradio as gr
from rich.console import Console

from promptcraftr.agent.wizard import PromptWizard
from promptcraftr.utils.core import load_app_config, open_session_store
from promptcraftr.utils.render import markdown_to_html, progress_markdown

console = Console()

TIP = (
    "Tip: use `/compile`, `/reset`, `/show`, `/back`, `/skip`, "
    "`/set <field>: <value>`, or `/import <text>`."
)


# ----------------------------- Helpers ---------------------------------

def chat_history(wizard: PromptWizard) -> List[Dict[str, str]]:
    return [{"role": m.role, "content": markdown_to_html(m.text)} for m in wizard.messages]


def progress_view(wizard: PromptWizard) -> str:
    return "### Progress\n\n" + progress_markdown(wizard.progress())


# ----------------------------- UI Actions ---------------------------------

def action_send(wizard: PromptWizard, text: str) -> Tuple[List[Dict[str, str]], str, str, bool]:
    """Returns (history, progress, compiled text, show compile panel)."""
    compiled = wizard.send(text)
    return chat_history(wizard), progress_view(wizard), compiled or "", compiled is not None


def action_compile(wizard: PromptWizard) -> str:
    return wizard.compile()


def action_show_draft(wizard: PromptWizard) -> Tuple[List[Dict[str, str]], str]:
    wizard.show_draft()
    wizard.save()
    return chat_history(wizard), progress_view(wizard)


def action_close_compiled(edited_text: str) -> Tuple[str, bool]:
    """Discard the compile panel's scratch text. Returns (textbox value, panel visible)."""
    return "", False


def action_reset_session(wizard: PromptWizard) -> Tuple[List[Dict[str, str]], str]:
    wizard.wipe()
    console.print("[bold yellow]Session storage cleared.[/bold yellow]")
    return chat_history(wizard), progress_view(wizard)


def build_app(wizard: PromptWizard | None = None) -> gr.Blocks:
    if wizard is None:
        wizard = PromptWizard(open_session_store()).load()

    with gr.Blocks(title="Prompt Engineering Assistant", theme=gr.themes.Soft()) as demo:
        gr.Markdown("# Prompt Engineering Assistant\nGuided prompt builder: answer ten quick questions, then compile.")

        with gr.Row():
            with gr.Column(scale=2):
                chatbot = gr.Chatbot(
                    value=chat_history(wizard),
                    type="messages",
                    label="Chat",
                    height=520,
                    render_markdown=False,
                )
                with gr.Row():
                    user_input = gr.Textbox(
                        show_label=False,
                        lines=2,
                        placeholder=wizard.placeholder(),
                        scale=5,
                    )
                    send_btn = gr.Button("Send", scale=1)
                gr.Markdown(TIP)
            with gr.Column(scale=1):
                progress = gr.Markdown(progress_view(wizard))
                compile_btn = gr.Button("Compile Now")
                show_btn = gr.Button("Show Draft in Chat")
                reset_btn = gr.Button("Reset Session", variant="stop")

        # Compiled prompt panel. Edits here are never written back to the draft.
        with gr.Column(visible=False) as compile_panel:
            gr.Markdown("### Final Compiled Prompt\nCopy this into your LLM. Edit anything you like before copying.")
            compiled_box = gr.Textbox(show_label=False, lines=16, interactive=True)
            done_btn = gr.Button("Done")

        def on_send(text: str):
            history, prog, compiled, show_panel = action_send(wizard, text)
            panel = gr.update(visible=True) if show_panel else gr.update()
            box = compiled if show_panel else gr.update()
            return history, prog, gr.update(value="", placeholder=wizard.placeholder()), box, panel

        send_outputs = [chatbot, progress, user_input, compiled_box, compile_panel]
        send_btn.click(on_send, inputs=user_input, outputs=send_outputs)
        user_input.submit(on_send, inputs=user_input, outputs=send_outputs)

        def on_compile():
            return action_compile(wizard), gr.update(visible=True)

        compile_btn.click(on_compile, outputs=[compiled_box, compile_panel])

        show_btn.click(lambda: action_show_draft(wizard), outputs=[chatbot, progress])

        def on_reset():
            history, prog = action_reset_session(wizard)
            return history, prog, gr.update(value="", placeholder=wizard.placeholder()), "", gr.update(visible=False)

        reset_btn.click(on_reset, outputs=send_outputs)

        def on_done(edited: str):
            cleared, visible = action_close_compiled(edited)
            return cleared, gr.update(visible=visible)

        done_btn.click(on_done, inputs=compiled_box, outputs=[compiled_box, compile_panel])

        def on_load():
            return chat_history(wizard), progress_view(wizard), gr.update(placeholder=wizard.placeholder())

        demo.load(on_load, outputs=[chatbot, progress, user_input])

    return demo


def main():
    config = load_app_config()
    console.print(f"[bold blue]Serving on[/bold blue] {config.server_name}:{config.server_port}")
    app = build_app(PromptWizard(open_session_store(config)).load())
    app.queue().launch(server_name=config.server_name, server_port=config.server_port)


if __name__ == "__main__":
    main()
