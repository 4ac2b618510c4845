import argparse
import logging
import sys

import gradio as gr

from bot_agents.assistant import assistant_agent
from chat_config import LOG_LEVEL, UI_TEST_MODE
from dash_board import DASHBOARD_TXT
from logic.logic_chat import (
    MAX_QUICK_REPLIES,
    make_quick_reply_handler,
    open_chat_action,
    reset_chat_action,
    send_text_action,
)
from storage import ensure_base_dir

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

_parser = argparse.ArgumentParser(add_help=False)
_parser.add_argument("--mode", type=str, default=None)
_parser.add_argument("--user", type=str, default="demo")
_args, _unknown = _parser.parse_known_args(sys.argv[1:])
if _args.mode == "test":
    assistant_agent.test_mode = True

ensure_base_dir()
logger.info(
    f"Starting chat for user {_args.user!r} "
    f"(assistant {'canned replies' if not assistant_agent.enabled else 'live'}, UI_TEST_MODE={UI_TEST_MODE})"
)

with gr.Blocks(title="Strove Wellness Chat") as demo:
    user_id_state = gr.State(_args.user)

    with gr.Row():
        # Chat
        with gr.Column(scale=3):
            gr.Markdown("## 💬 Strove Wellness Chat")
            chatbot = gr.Chatbot(label="Chat", type="messages", height=560)

            with gr.Row():
                quick_reply_buttons = [
                    gr.Button("", visible=False, size="sm", min_width=80)
                    for _ in range(MAX_QUICK_REPLIES)
                ]

            with gr.Row():
                msg_box = gr.Textbox(
                    label="Your message",
                    placeholder="Type a message, MENU, HELP or STOP",
                    lines=1,
                    scale=4,
                )
                send_btn = gr.Button("Send", variant="primary", scale=1)

        # Side panel
        with gr.Column(scale=1, min_width=220):
            gr.Markdown("### 🛠 Debug")
            debug_box = gr.Markdown("")
            reset_btn = gr.Button("Reset conversation", variant="stop")
            with gr.Accordion("About", open=False):
                gr.Markdown(DASHBOARD_TXT)

    turn_outputs = [chatbot, msg_box, debug_box, *quick_reply_buttons]

    # ====== Event bindings ======

    demo.load(open_chat_action, inputs=[user_id_state], outputs=turn_outputs)

    send_btn.click(send_text_action, inputs=[msg_box, chatbot, user_id_state], outputs=turn_outputs)
    msg_box.submit(send_text_action, inputs=[msg_box, chatbot, user_id_state], outputs=turn_outputs)

    for i, btn in enumerate(quick_reply_buttons):
        btn.click(make_quick_reply_handler(i), inputs=[chatbot, user_id_state], outputs=turn_outputs)

    reset_btn.click(reset_chat_action, inputs=[user_id_state], outputs=turn_outputs)

if __name__ == "__main__":
    demo.launch()
