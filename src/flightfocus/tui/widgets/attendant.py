"""Flight attendant message toast."""

from textual.widgets import Static

from flightfocus.messages import AttendantMessage


class AttendantToast(Static):
    """Shows the visible attendant message, hidden when there is none."""

    DEFAULT_CSS = """
    AttendantToast {
        width: 100%;
        height: auto;
        padding: 1 2;
        margin: 1 0;
        background: $boost;
        border-left: thick $accent;
        color: $text;
        display: none;
    }

    AttendantToast.visible {
        display: block;
    }

    AttendantToast.business {
        border-left: thick $warning;
    }
    """

    def show_message(self, message: AttendantMessage | None) -> None:
        """Display ``message``, or hide the toast for None."""
        if message is None:
            self.remove_class("visible")
            self.update("")
            return
        self.set_class(message.type == "business", "business")
        self.update(f"Flight attendant: {message.message}")
        self.add_class("visible")
