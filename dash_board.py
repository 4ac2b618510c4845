DASHBOARD_TXT = """
## 📊 About – Strove Wellness Chat

A scripted wellness assistant that runs the same conversation a member would
have over WhatsApp: short messages, up to a handful of quick-reply buttons, and
plain-text links instead of embedded pages.

---

### 🧭 What you can do

- **Onboarding**: agree, pick a language, link your account with a 6-digit code.
- **Daily check-in**: sleep, stress, activity and mood. Earns coins and builds your streak.
- **Health summary / My score**: weekly and monthly figures with trends.
  The first time, a short profile (gender, height, weight, active days, goals) is asked.
- **Challenges**: join the monthly *Move More* challenge and track progress.
- **Log activity**: type, duration (e.g. `45m`, `1h30m`) and intensity.
- **Meal scan**: describe a meal and get a score with one tip.
- **Face scan**: open the scan link, then tap *Scan complete* for a simulated vitals report.
- **Content library**: featured items, categories, search; reply with a number to open.
- **AI chat**: ask anything; without an API key you get data-aware canned answers.
- **Coins**: balance, ways to earn, rewards store.

---

### ⌨️ Commands (type any time)

| Command | Effect |
|---|---|
| `MENU` / `CANCEL` | back to the main menu |
| `HELP` | help topics and support |
| `STOP` | unsubscribe |
| `START` | restart (onboarding or menu) |
| `CONNECT` | connect a fitness app |

In the main menu you can also type the option number (`1`–`9`, `0`) or a word
like *summary* or *coins*. Anything else goes to the AI assistant.

---

### ⚙️ Configuration

Environment variables read by `chat_config.py`:

- `OPENAI_API_KEY`, `OPENAI_BASE_URL`, `CHAT_MODEL_NAME`: chat-completion endpoint.
- `UI_TEST_MODE=true` (or `--mode test`): never call the API.
- `CONTENT_API_URL`, `CONTENT_API_TOKEN`: content library.
- `DATA_DIR`: where `<user>/state.json` lives (default `user_data/`).
- `TYPING_DELAY_SCALE`: replay the typing pauses (`1` = real time, `0` = off).

Run with `python app.py --user alice` to keep a separate conversation per user.
The **Reset conversation** button deletes the saved state and starts over.
"""
