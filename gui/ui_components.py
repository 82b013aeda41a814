"""
Meditation Timer UI Components - CustomTkinter Edition

Reusable widgets and design constants for the timer window.
"""
import sys
from typing import Callable, Optional

import customtkinter as ctk
from customtkinter import CTkFont


# --- Design System Constants ---
COLORS = {
    "bg": "#EEF2FF",            # Indigo mist
    "surface": "#FFFFFF",       # White cards
    "text_primary": "#1E1B4B",  # Deep indigo
    "text_secondary": "#6B7280", # Gray
    "accent": "#6366F1",        # Indigo
    "accent_hover": "#4F46E5",
    "button_text": "#FFFFFF",
    "button_muted": "#F3F4F6",  # Cancel / stepper buttons
    "button_muted_hover": "#E5E7EB",
    "button_stop": "#EF4444",
    "button_stop_hover": "#DC2626",
    "button_save": "#22C55E",
    "button_save_hover": "#16A34A",
    "input_bg": "#F9FAFB",
    "border": "#D1D5DB",
    "error": "#EF4444",
    "row_bg": "#F9FAFB",        # History rows
}

# (size, weight) per role
FONT_SPECS = {
    "title": (26, "bold"),
    "timer": (40, "bold"),
    "stat": (22, "bold"),
    "heading": (18, "bold"),
    "body": (14, "normal"),
    "body_bold": (14, "bold"),
    "small": (12, "normal"),
    "input": (14, "normal"),
}


def _font_family() -> str:
    if sys.platform == "darwin":
        return "Helvetica Neue"
    if sys.platform == "win32":
        return "Segoe UI"
    return "Helvetica"


def get_ctk_font(font_key: str) -> CTkFont:
    """
    Get a CTkFont object for the given font key.

    Args:
        font_key: Key from FONT_SPECS (unknown keys fall back to "body").

    Returns:
        CTkFont object.
    """
    size, weight = FONT_SPECS.get(font_key, FONT_SPECS["body"])
    family = "Courier" if font_key == "timer" else _font_family()
    return CTkFont(family=family, size=size, weight=weight)


class RoundedButton(ctk.CTkButton):
    """A rounded button using CustomTkinter's CTkButton."""

    def __init__(
        self,
        parent,
        text: str,
        command: Optional[Callable] = None,
        width: int = 200,
        height: int = 44,
        radius: int = 10,
        bg_color: str = COLORS["accent"],
        hover_color: Optional[str] = None,
        text_color: str = COLORS["button_text"],
        font_type: str = "body_bold",
        **kwargs
    ):
        """
        Initialize a rounded button.

        Args:
            parent: Parent widget.
            text: Button text.
            command: Callback function when clicked.
            width: Button width.
            height: Button height.
            radius: Corner radius.
            bg_color: Background color.
            hover_color: Hover color (defaults to bg_color).
            text_color: Text color.
            font_type: Font key from FONT_SPECS.
        """
        super().__init__(
            parent,
            text=text,
            command=command,
            width=width,
            height=height,
            corner_radius=radius,
            fg_color=bg_color,
            hover_color=hover_color or bg_color,
            text_color=text_color,
            font=get_ctk_font(font_type),
            **kwargs
        )

    def set_style(self, text: str, bg_color: str, hover_color: str):
        """Swap label and colors (used by the Start/Stop toggle)."""
        self.configure(text=text, fg_color=bg_color, hover_color=hover_color)


class Card(ctk.CTkFrame):
    """A white rounded container."""

    def __init__(self, parent, radius: int = 16, bg_color: str = COLORS["surface"], **kwargs):
        super().__init__(parent, corner_radius=radius, fg_color=bg_color, **kwargs)


class StatTile(ctk.CTkFrame):
    """A big number over a small caption."""

    def __init__(self, parent, caption: str, value: str = "0", **kwargs):
        super().__init__(parent, fg_color="transparent", **kwargs)

        self.value_label = ctk.CTkLabel(
            self,
            text=value,
            text_color=COLORS["text_primary"],
            font=get_ctk_font("stat"),
        )
        self.value_label.pack()

        ctk.CTkLabel(
            self,
            text=caption,
            text_color=COLORS["text_secondary"],
            font=get_ctk_font("small"),
        ).pack()

    def set_value(self, value) -> None:
        self.value_label.configure(text=str(value))


class StyledEntry(ctk.CTkFrame):
    """
    A styled entry field with placeholder and error state support.

    This uses CTkEntry with an error label underneath.
    """

    def __init__(
        self,
        parent,
        placeholder: str = "",
        width: int = 280,
        height: int = 44,
        show: str = "",
        **kwargs
    ):
        """
        Initialize a styled entry.

        Args:
            parent: Parent widget.
            placeholder: Placeholder text.
            width: Entry width.
            height: Entry height.
            show: Mask character (e.g. "*" for passwords).
        """
        super().__init__(parent, fg_color="transparent", **kwargs)

        self.command = None
        self._has_feedback = False

        self.entry = ctk.CTkEntry(
            self,
            placeholder_text=placeholder,
            width=width,
            height=height,
            corner_radius=10,
            fg_color=COLORS["input_bg"],
            text_color=COLORS["text_primary"],
            placeholder_text_color=COLORS["text_secondary"],
            border_color=COLORS["border"],
            border_width=1,
            font=get_ctk_font("input"),
            show=show,
        )
        self.entry.pack(fill="x")

        self.error_label = ctk.CTkLabel(
            self,
            text=" ",
            text_color=COLORS["error"],
            font=get_ctk_font("small"),
            anchor="w",
            height=18
        )
        self.error_label.pack(fill="x", pady=(2, 0))

        self.entry.bind("<Return>", self._on_return)
        self.entry.bind("<Key>", self._on_key_press)

    def show_error(self, message: str):
        """Show an error message with red border."""
        self.error_label.configure(text=message)
        self.entry.configure(border_color=COLORS["error"])
        self._has_feedback = True

    def clear_error(self):
        """Clear error state."""
        if self._has_feedback:
            self.error_label.configure(text=" ")
            self.entry.configure(border_color=COLORS["border"])
            self._has_feedback = False

    def _on_key_press(self, event):
        self.clear_error()

    def _on_return(self, event):
        if self.command:
            self.command()

    def get(self) -> str:
        return self.entry.get()

    def bind_return(self, command: Callable):
        """Bind a command to the return key."""
        self.command = command

    def delete(self, first, last=None):
        self.entry.delete(first, last)

    def focus_set(self):
        self.entry.focus_set()
