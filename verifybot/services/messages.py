"""Message templates - separates wording and formatting from the flows."""

from typing import Dict, List, Optional

from verifybot.utils.formatting import escape_html, escape_markdown


class Messages:
    """Static texts and templates for every bot reply."""

    WELCOME = "👋 Welcome! Please go to the website and click 'Verify via Telegram' to start."
    SECURITY_CHECK = (
        "🔐 *Security Check*\n\n"
        "To verify your identity and receive your code, "
        "please tap the button below to share your phone number."
    )
    SHARE_PHONE_BUTTON = "📱 Share Phone Number"
    SYSTEM_ERROR = "⚠️ System Error. Please try again."
    OWN_CONTACT_REQUIRED = "⚠️ Error: Please share your own contact."
    SESSION_EXPIRED = "⚠️ Session expired."
    CONTACT_ERROR = "⚠️ Error processing contact. Please try again."

    UNAUTHORIZED = "⛔ Unauthorized."
    ASK_COUNT = "🔢 How many codes would you like to generate? (Enter a number 1-{maximum})"
    INVALID_COUNT = "❌ Invalid number. Enter 1-{maximum}."
    ASK_NAME = "📂 Enter the *Resource Name* (Exactly as it appears in React):"
    ASK_LINK = "🔗 Paste the *Download Link* for this resource:"
    PREVIEW_PENDING = "👆 Use the buttons on the preview to add, regenerate or cancel."
    SAVE_IN_PROGRESS = "⏳ Saving codes, please wait."
    DIALOG_EXPIRED = "Session Expired."
    DATABASE_ERROR = "❌ Database Error."
    CANCELLED = "❌ Cancelled."
    NO_UNUSED_CODES = "📭 No unused codes."

    BUTTON_CONFIRM = "✅ Add to DB"
    BUTTON_REGENERATE = "🔄 Regenerate"
    BUTTON_CANCEL = "❌ Cancel"
    BUTTON_REFRESH = "🔄 Refresh"

    CONTACT_ADMIN = "📞 *Contact Admin*"
    NO_ADMIN_LINKS = "📞 No admin contact links are configured."
    INFO_UNAVAILABLE = "⚠️ Could not fetch info."

    @staticmethod
    def ask_count(maximum: int) -> str:
        return Messages.ASK_COUNT.format(maximum=maximum)

    @staticmethod
    def invalid_count(maximum: int) -> str:
        return Messages.INVALID_COUNT.format(maximum=maximum)

    @staticmethod
    def verification_successful(otp: str) -> str:
        """OTP reply; the code sits in a code span for one-tap copy."""
        return f"✅ *Verification Successful*\n\nYour code is:\n`{otp}`"

    @staticmethod
    def code_preview(name: str, codes: List[str], link: str, regenerated: bool = False) -> str:
        """
        Preview of a generated batch.

        Legacy Markdown ignores backslash escapes inside an entity, so escaped
        free text always sits outside bold spans.
        """
        title = "🔄 *Regenerated Codes for*" if regenerated else "📜 *Codes for*"
        body = "\n".join(f"`{code}`" for code in codes)
        return (
            f"{title} {escape_markdown(name)}\n\n"
            f"{body}\n\n"
            f"🔗 *Link:* {escape_markdown(link)}"
        )

    @staticmethod
    def codes_added(count: int, name: str) -> str:
        return f"✅ Added {count} codes for {escape_markdown(name)} to Firestore."

    @staticmethod
    def unused_codes(grouped: Dict[str, List[str]], limit: int) -> str:
        """
        Listing of unused codes grouped by resource name.

        Args:
            grouped: Resource name -> codes
            limit: Maximum message length; trailing groups are summarized

        Returns:
            Markdown text no longer than ``limit``
        """
        total = sum(len(codes) for codes in grouped.values())
        text = f"📋 *Unused Codes* ({total})"
        shown = 0
        for name in sorted(grouped):
            codes = grouped[name]
            section = f"\n\n📂 {escape_markdown(name)} ({len(codes)})\n" + "\n".join(
                f"`{code}`" for code in codes
            )
            remaining = total - shown - len(codes)
            footer_room = len(Messages._more_footer(remaining)) if remaining else 0
            if len(text) + len(section) + footer_room > limit:
                break
            text += section
            shown += len(codes)
        if shown < total:
            text += Messages._more_footer(total - shown)
        return text

    @staticmethod
    def _more_footer(hidden: int) -> str:
        return f"\n\n…and {hidden} more"

    @staticmethod
    def bot_info(
        name: str, username: Optional[str], bot_id: int, creator: str, uptime: str
    ) -> str:
        """HTML caption for /info."""
        return (
            "<b>🤖 Bot Identity</b>\n"
            f"<blockquote><b>Name:</b> {escape_html(name)}\n"
            f"<b>Username:</b> @{escape_html(username or '')}\n"
            f"<b>Bot ID:</b> <code>{bot_id}</code></blockquote>\n"
            "<b>⚙️ Bot Infrastructure</b>\n"
            f"<blockquote><b>👤 Creator:</b> {escape_html(creator)}\n"
            f"<b>⏱ Uptime:</b> {uptime}\n"
            "<b>🔥 Database:</b> Firestore</blockquote>"
        )
