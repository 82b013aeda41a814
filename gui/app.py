"""
Meditation Timer - Desktop GUI Application

A thin CustomTkinter shell around the session controller: login screen,
countdown, post-session review and history. All timing and bell logic
lives in tracking/ and audio/.
"""

import logging
import sys
from pathlib import Path
from tkinter import messagebox
from typing import List, Optional

import customtkinter as ctk

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import config
from audio import CuePlayer
from gui.ui_components import COLORS, Card, RoundedButton, StatTile, StyledEntry, get_ctk_font
from sync.base import SyncError, UserIdentity
from sync.supabase_client import SupabaseIdentityProvider, SupabaseSessionStore
from tracking.analytics import display_name, format_date, format_time
from tracking.countdown import CountdownEngine, TimerStatus
from tracking.lifecycle import SessionController
from tracking.scheduler import TkScheduler
from tracking.session import Session

logger = logging.getLogger(__name__)

WINDOW_WIDTH = 460
WINDOW_HEIGHT = 760


class MeditationApp:
    """Main window: swaps between the login card and the timer card."""

    def __init__(self, identity, store):
        """
        Args:
            identity: Identity provider (see sync.base)
            store: Session store (see sync.base)
        """
        ctk.set_appearance_mode("light")

        self.root = ctk.CTk()
        self.root.title("Meditation Timer")
        self.root.geometry(f"{WINDOW_WIDTH}x{WINDOW_HEIGHT}")
        self.root.minsize(400, 600)
        self.root.configure(fg_color=COLORS["bg"])

        self.identity = identity
        self.store = store

        # Core wiring
        self.scheduler = TkScheduler(self.root)
        self.cue_player = CuePlayer(self.scheduler)
        self.cue_player.preload()
        self.engine = CountdownEngine(self.scheduler, self.cue_player)
        self.controller = SessionController(self.engine, identity, store)

        self.controller.on_tick = self._update_timer_label
        self.controller.on_review = self._show_review
        self.controller.on_idle = self._show_timer_panel
        self.controller.on_sessions_changed = self._update_user_stats
        self.controller.on_error = self._show_error_status

        self.user: Optional[UserIdentity] = identity.current_user()
        self.show_history = False
        self.global_labels = []
        self._status_reset_id = None

        self._create_widgets()

        # Provider/store notifications may arrive off the Tk thread
        identity.subscribe(lambda user: self.root.after(0, lambda: self._on_auth_change(user)))
        store.subscribe(lambda: self.root.after(0, self._refresh_global_stats))

        self._on_auth_change(self.user)
        self.root.after(100, self._poll_global_stats)
        self.root.protocol("WM_DELETE_WINDOW", self._on_close)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def _create_widgets(self):
        self.card = Card(self.root)
        self.card.pack(fill="both", expand=True, padx=20, pady=20)

        self._create_login_frame()
        self._create_main_frame()

    def _create_global_stats(self, parent, heading: str):
        """Global totals block; registers its labels for refresh."""
        ctk.CTkLabel(
            parent,
            text=heading,
            text_color=COLORS["text_secondary"],
            font=get_ctk_font("body_bold"),
        ).pack(pady=(10, 0))

        minutes_label = ctk.CTkLabel(
            parent,
            text="0 minutes",
            text_color=COLORS["text_primary"],
            font=get_ctk_font("title"),
        )
        minutes_label.pack()
        sessions_label = ctk.CTkLabel(
            parent,
            text="across 0 sessions",
            text_color=COLORS["text_secondary"],
            font=get_ctk_font("small"),
        )
        sessions_label.pack(pady=(0, 10))
        self.global_labels.append((minutes_label, sessions_label))

    def _create_login_frame(self):
        self.login_frame = ctk.CTkFrame(self.card, fg_color="transparent")

        ctk.CTkLabel(
            self.login_frame,
            text="Meditation Timer",
            text_color=COLORS["text_primary"],
            font=get_ctk_font("title"),
        ).pack(pady=(30, 10))

        self._create_global_stats(self.login_frame, "Global Meditation Stats")

        self.email_entry = StyledEntry(self.login_frame, placeholder="Email")
        self.email_entry.pack(pady=(20, 4))
        self.password_entry = StyledEntry(self.login_frame, placeholder="Password", show="*")
        self.password_entry.pack(pady=4)
        self.password_entry.bind_return(self._on_login)

        RoundedButton(
            self.login_frame,
            text="Continue",
            command=self._on_login,
            width=280,
            hover_color=COLORS["accent_hover"],
        ).pack(pady=(10, 0))

    def _create_main_frame(self):
        self.main_frame = ctk.CTkFrame(self.card, fg_color="transparent")

        # Header
        header = ctk.CTkFrame(self.main_frame, fg_color="transparent")
        header.pack(fill="x", padx=20, pady=(20, 0))
        ctk.CTkLabel(
            header,
            text="Meditation Timer",
            text_color=COLORS["text_primary"],
            font=get_ctk_font("heading"),
        ).pack(side="left")
        ctk.CTkButton(
            header,
            text="Log out",
            width=70,
            fg_color="transparent",
            hover_color=COLORS["button_muted"],
            text_color=COLORS["text_secondary"],
            command=self._on_logout,
        ).pack(side="right")
        self.user_label = ctk.CTkLabel(
            header,
            text="",
            text_color=COLORS["text_secondary"],
            font=get_ctk_font("small"),
        )
        self.user_label.pack(side="right", padx=8)

        self._create_global_stats(self.main_frame, "Global Meditation Time")

        self._create_timer_panel()
        self._create_review_panel()

    def _create_timer_panel(self):
        self.timer_panel = ctk.CTkFrame(self.main_frame, fg_color="transparent")

        ctk.CTkLabel(
            self.timer_panel,
            text="Duration (minutes)",
            text_color=COLORS["text_secondary"],
            font=get_ctk_font("small"),
        ).pack()
        self.duration_slider = ctk.CTkSlider(
            self.timer_panel,
            from_=config.MIN_DURATION_MINUTES,
            to=config.MAX_DURATION_MINUTES,
            number_of_steps=config.MAX_DURATION_MINUTES - config.MIN_DURATION_MINUTES,
            command=self._on_duration_change,
            button_color=COLORS["accent"],
            progress_color=COLORS["accent"],
        )
        self.duration_slider.set(self.engine.state.duration_minutes)
        self.duration_slider.pack(fill="x", padx=30, pady=(4, 0))
        self.duration_label = ctk.CTkLabel(
            self.timer_panel,
            text=f"{self.engine.state.duration_minutes} minutes",
            text_color=COLORS["text_primary"],
            font=get_ctk_font("body_bold"),
        )
        self.duration_label.pack()

        self.timer_label = ctk.CTkLabel(
            self.timer_panel,
            text=format_time(self.engine.state.remaining_seconds),
            text_color=COLORS["text_primary"],
            font=get_ctk_font("timer"),
        )
        self.timer_label.pack(pady=(16, 0))
        self.status_label = ctk.CTkLabel(
            self.timer_panel,
            text="Ready to begin",
            text_color=COLORS["text_secondary"],
            font=get_ctk_font("small"),
        )
        self.status_label.pack()

        self.start_stop_btn = RoundedButton(
            self.timer_panel,
            text="Start",
            command=self._toggle_session,
            width=320,
            hover_color=COLORS["accent_hover"],
        )
        self.start_stop_btn.pack(pady=12)

        ctk.CTkLabel(
            self.timer_panel,
            text=(f"{config.START_CUE_COUNT} bells will sound at the start and end.\n"
                  f"1 bell every {config.INTERVAL_CUE_SECONDS // 60} minutes during the session."),
            text_color=COLORS["text_secondary"],
            font=get_ctk_font("small"),
        ).pack()

        # Personal stats
        stats_row = ctk.CTkFrame(self.timer_panel, fg_color="transparent")
        stats_row.pack(fill="x", pady=(16, 4))
        self.sessions_tile = StatTile(stats_row, "Sessions")
        self.minutes_tile = StatTile(stats_row, "Minutes")
        self.distractions_tile = StatTile(stats_row, "Avg. Distractions")
        for tile in (self.sessions_tile, self.minutes_tile, self.distractions_tile):
            tile.pack(side="left", expand=True)

        self.history_btn = ctk.CTkButton(
            self.timer_panel,
            text="Show History",
            fg_color="transparent",
            hover_color=COLORS["button_muted"],
            text_color=COLORS["accent"],
            command=self._toggle_history,
        )
        self.history_btn.pack()
        self.history_frame = ctk.CTkScrollableFrame(self.timer_panel, fg_color="transparent", height=160)

    def _create_review_panel(self):
        self.review_panel = ctk.CTkFrame(self.main_frame, fg_color="transparent")

        ctk.CTkLabel(
            self.review_panel,
            text="Session Complete",
            text_color=COLORS["text_primary"],
            font=get_ctk_font("heading"),
        ).pack(pady=(20, 4))
        self.review_duration_label = ctk.CTkLabel(
            self.review_panel,
            text="",
            text_color=COLORS["text_secondary"],
            font=get_ctk_font("body"),
        )
        self.review_duration_label.pack()

        ctk.CTkLabel(
            self.review_panel,
            text="Number of Distractions",
            text_color=COLORS["text_secondary"],
            font=get_ctk_font("small"),
        ).pack(pady=(20, 4))

        stepper = ctk.CTkFrame(self.review_panel, fg_color="transparent")
        stepper.pack()
        RoundedButton(
            stepper, text="-", width=44, radius=22,
            bg_color=COLORS["button_muted"], hover_color=COLORS["button_muted_hover"],
            text_color=COLORS["text_primary"], command=self._on_decrement,
        ).pack(side="left")
        self.distractions_label = ctk.CTkLabel(
            stepper,
            text="0",
            width=60,
            text_color=COLORS["text_primary"],
            font=get_ctk_font("stat"),
        )
        self.distractions_label.pack(side="left")
        RoundedButton(
            stepper, text="+", width=44, radius=22,
            bg_color=COLORS["button_muted"], hover_color=COLORS["button_muted_hover"],
            text_color=COLORS["text_primary"], command=self._on_increment,
        ).pack(side="left")

        actions = ctk.CTkFrame(self.review_panel, fg_color="transparent")
        actions.pack(pady=24)
        RoundedButton(
            actions, text="Cancel", width=150,
            bg_color=COLORS["button_muted"], hover_color=COLORS["button_muted_hover"],
            text_color=COLORS["text_primary"], command=self.controller.discard_session,
        ).pack(side="left", padx=6)
        RoundedButton(
            actions, text="Save", width=150,
            bg_color=COLORS["button_save"], hover_color=COLORS["button_save_hover"],
            command=self._on_save,
        ).pack(side="left", padx=6)

    # ------------------------------------------------------------------
    # Screens
    # ------------------------------------------------------------------

    def _on_auth_change(self, user: Optional[UserIdentity]):
        """Switch screens when the user signs in or out."""
        self.user = user
        self.controller.handle_auth_change(user)

        if user is None:
            self.main_frame.pack_forget()
            self.login_frame.pack(fill="both", expand=True)
            self.email_entry.focus_set()
        else:
            self.login_frame.pack_forget()
            self.user_label.configure(text=user.display_name)
            self.main_frame.pack(fill="both", expand=True)
            self._show_timer_panel()

    def _show_timer_panel(self):
        self.review_panel.pack_forget()
        self.timer_panel.pack(fill="both", expand=True)

        state = self.engine.state
        self.timer_label.configure(text=format_time(state.remaining_seconds))
        self.status_label.configure(text="Ready to begin")
        self.duration_slider.configure(state="normal")
        self.start_stop_btn.set_style("Start", COLORS["accent"], COLORS["accent_hover"])

    def _show_review(self, duration_minutes: int, completed: bool):
        self.timer_panel.pack_forget()
        self.review_duration_label.configure(text=f"Duration: {duration_minutes} minutes")
        self.distractions_label.configure(text="0")
        self.review_panel.pack(fill="both", expand=True)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _on_login(self):
        email = self.email_entry.get()
        if not email.strip():
            self.email_entry.show_error("Enter your email to continue")
            return

        result = self.controller.log_in(email, self.password_entry.get())
        if not result["success"]:
            messagebox.showerror("Login", result["error"])
            return

        # The identity subscription switches screens
        self.password_entry.delete(0, "end")

    def _on_logout(self):
        if self.engine.state.is_running:
            if not messagebox.askyesno(
                "Session Active",
                "A meditation session is in progress. Are you sure you want to log out?"
            ):
                return
        self.controller.log_out()
        self._on_auth_change(None)

    def _toggle_session(self):
        if self.engine.state.is_running:
            self.controller.stop_session()
            return

        result = self.controller.start_session()
        if not result["success"]:
            messagebox.showwarning("Meditation Timer", result["error"])
            return

        self._cancel_status_reset()
        self.duration_slider.configure(state="disabled")
        self.status_label.configure(text="Time remaining", text_color=COLORS["text_secondary"])
        self.start_stop_btn.set_style("Stop", COLORS["button_stop"], COLORS["button_stop_hover"])

    def _on_duration_change(self, value):
        minutes = int(round(value))
        if self.controller.set_duration(minutes):
            self.duration_label.configure(text=f"{minutes} minutes")
            self.timer_label.configure(text=format_time(self.engine.state.remaining_seconds))

    def _on_increment(self):
        self.distractions_label.configure(text=str(self.controller.increment_distractions()))

    def _on_decrement(self):
        self.distractions_label.configure(text=str(self.controller.decrement_distractions()))

    def _on_save(self):
        self.controller.commit_session()

    def _toggle_history(self):
        self.show_history = not self.show_history
        if self.show_history:
            self.history_btn.configure(text="Hide History")
            self._render_history(self.controller.sessions)
            self.history_frame.pack(fill="both", expand=True, pady=(4, 0))
        else:
            self.history_btn.configure(text="Show History")
            self.history_frame.pack_forget()

    # ------------------------------------------------------------------
    # Display updates
    # ------------------------------------------------------------------

    def _update_timer_label(self, remaining_seconds: int):
        self.timer_label.configure(text=format_time(remaining_seconds))

    def _update_user_stats(self, sessions: List[Session]):
        stats = self.controller.get_user_stats()
        self.sessions_tile.set_value(stats["total_sessions"])
        self.minutes_tile.set_value(stats["total_minutes"])
        self.distractions_tile.set_value(stats["average_distractions"])
        if self.show_history:
            self._render_history(sessions)

    def _render_history(self, sessions: List[Session]):
        for child in self.history_frame.winfo_children():
            child.destroy()

        for session in sessions:
            row = ctk.CTkFrame(self.history_frame, fg_color=COLORS["row_bg"], corner_radius=8)
            row.pack(fill="x", pady=3)
            top = ctk.CTkFrame(row, fg_color="transparent")
            top.pack(fill="x", padx=10, pady=(6, 0))
            ctk.CTkLabel(top, text=display_name(session.user_email or ""),
                         text_color=COLORS["text_secondary"], font=get_ctk_font("small")).pack(side="left")
            ctk.CTkLabel(top, text=format_date(session.completed_at),
                         text_color=COLORS["text_secondary"], font=get_ctk_font("small")).pack(side="right")
            ctk.CTkLabel(
                row,
                text=f"{session.duration_minutes} minutes, {session.distractions} distractions",
                text_color=COLORS["text_secondary"],
                font=get_ctk_font("small"),
                anchor="w",
            ).pack(fill="x", padx=10, pady=(0, 6))

    def _refresh_global_stats(self):
        stats = self.controller.refresh_global_stats()
        for minutes_label, sessions_label in self.global_labels:
            minutes_label.configure(text=f"{stats['total_minutes']} minutes")
            sessions_label.configure(text=f"across {stats['total_sessions']} sessions")

    def _poll_global_stats(self):
        self._refresh_global_stats()
        self.root.after(config.STATS_REFRESH_SECONDS * 1000, self._poll_global_stats)

    def _show_error_status(self, error_type: str, message: str):
        """Non-blocking notice; the timer has already returned to idle."""
        logger.debug(f"Showing {error_type} notice")
        self._cancel_status_reset()
        self.status_label.configure(text=message, text_color=COLORS["error"])
        self._status_reset_id = self.root.after(5000, self._reset_status)

    def _reset_status(self):
        self._status_reset_id = None
        if self.engine.state.status == TimerStatus.IDLE:
            self.status_label.configure(text="Ready to begin", text_color=COLORS["text_secondary"])

    def _cancel_status_reset(self):
        if self._status_reset_id is not None:
            self.root.after_cancel(self._status_reset_id)
            self._status_reset_id = None

    def _on_close(self):
        """Handle window close event."""
        if self.engine.state.is_running:
            if not messagebox.askyesno(
                "Session Active",
                "A meditation session is in progress.\n\nStop it and exit without saving?"
            ):
                return
        self.root.destroy()

    def run(self):
        """Start the GUI application main loop."""
        logger.info("Starting Meditation Timer GUI")
        self.root.mainloop()


def main():
    """Entry point for the GUI application."""
    # Configure logging
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format=config.LOG_FORMAT
    )

    # Suppress noisy third-party logs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("hpack").setLevel(logging.WARNING)

    try:
        identity = SupabaseIdentityProvider()
        store = SupabaseSessionStore()
    except SyncError as e:
        logger.error(str(e))
        root = ctk.CTk()
        root.withdraw()
        messagebox.showerror("Meditation Timer", str(e))
        root.destroy()
        sys.exit(1)

    app = MeditationApp(identity, store)
    app.run()


if __name__ == "__main__":
    main()
