import logging
from typing import Optional

import tkinter as tk
from tkinter import messagebox, simpledialog

from . import events
from .alarm import AlarmPlayer
from .config import Settings, remember_minutes
from .engine import EngineSnapshot, InvalidDuration, TimerEngine
from .events import InputEvent
from .layout import edge_rect, fill_box
from .ticker import TkTicker
from .view import BLINK_INTERVAL, COMPLETION_MESSAGE, COMPLETION_TITLE, TROUGH_COLOR, blink_opacity, project

logger = logging.getLogger(__name__)


class SeekBarWindow:
    """Thin borderless bar along a screen edge that fills as time passes.

    Left click starts or pauses, right click opens the menu, Space toggles
    and Escape quits. Ticks and input share the Tk event loop.
    """

    def __init__(self, master: tk.Tk, engine: TimerEngine, settings: Optional[Settings] = None) -> None:
        self.master = master
        self.engine = engine
        self.settings = settings or Settings()
        self.alarm = AlarmPlayer()

        rect = edge_rect(
            self.settings.edge,
            self.master.winfo_screenwidth(),
            self.master.winfo_screenheight(),
            self.settings.thickness,
        )
        self.master.title("Seekbar Timer")
        self.master.overrideredirect(True)
        self.master.geometry(rect.geometry())
        self.master.attributes("-topmost", True)
        self._can_fade = self._set_opacity(self.settings.opacity)
        if not self._can_fade:
            logger.debug("window manager does not support transparency")
        self._blinker = TkTicker(self.master)
        self._dimmed = False

        self.canvas = tk.Canvas(
            self.master,
            width=rect.width,
            height=rect.height,
            bg=TROUGH_COLOR,
            highlightthickness=0,
            bd=0,
        )
        self.canvas.pack(fill="both", expand=True)
        self._fill_id = self.canvas.create_rectangle(0, 0, 0, 0, fill=TROUGH_COLOR, outline="")

        self.menu = tk.Menu(self.master, tearoff=0)
        self.menu.add_command(label="Reset", command=lambda: self.handle(events.RESET))
        self.menu.add_separator()
        self.menu.add_command(label="Set Time...", command=self._ask_duration)
        self.menu.add_separator()
        self.menu.add_command(label="Exit", command=lambda: self.handle(events.QUIT))

        self.engine.attach_ticker(TkTicker(self.master))
        self.engine.add_change_listener(self._render)
        self.engine.add_completion_listener(self._on_completed)

        self.canvas.bind("<ButtonRelease-1>", lambda _e: self.handle(events.TOGGLE))
        self.canvas.bind("<ButtonRelease-3>", self._show_menu)
        self.canvas.bind("<Configure>", lambda _e: self._render(self.engine.snapshot()))
        for keysym in events.SEEKBAR_KEYS:
            self.master.bind(f"<{keysym}>", lambda e: self._on_key(e.keysym))
        self.master.focus_force()
        self._render(self.engine.snapshot())

    def handle(self, event: InputEvent) -> None:
        try:
            keep_running = events.dispatch(self.engine, event)
        except InvalidDuration as exc:
            messagebox.showwarning("Invalid Duration", str(exc), parent=self.master)
            return
        if not keep_running:
            self.quit()

    def _on_key(self, keysym: str) -> None:
        event = events.event_for_key(events.SEEKBAR_KEYS, keysym)
        if event is not None:
            self.handle(event)

    def _show_menu(self, event: tk.Event) -> None:
        try:
            self.menu.tk_popup(event.x_root, event.y_root)
        finally:
            self.menu.grab_release()

    def _ask_duration(self) -> None:
        text = simpledialog.askstring(
            "Set Time",
            "Timer length in minutes:",
            initialvalue=str(self.engine.snapshot().total_seconds // 60),
            parent=self.master,
        )
        if text is None:
            return
        try:
            event = events.set_duration_event(text)
        except InvalidDuration as exc:
            messagebox.showwarning("Invalid Duration", str(exc), parent=self.master)
            return
        self.alarm.stop()
        self.handle(event)
        try:
            remember_minutes(event.minutes)
        except OSError as exc:
            logger.warning("could not save settings: %s", exc)

    def _render(self, snapshot: EngineSnapshot) -> None:
        render = project(snapshot)
        width = max(self.canvas.winfo_width(), 1)
        height = max(self.canvas.winfo_height(), 1)
        self.canvas.coords(self._fill_id, *fill_box(self.settings.edge, width, height, render.progress_fraction))
        self.canvas.itemconfigure(self._fill_id, fill=render.color)
        if render.blinking and self._can_fade:
            if not self._blinker.armed:
                self._blinker.arm(self._blink, BLINK_INTERVAL)
        elif self._blinker.armed:
            self._blinker.disarm()
            self._dimmed = False
            self._set_opacity(self.settings.opacity)

    def _blink(self) -> None:
        self._dimmed = not self._dimmed
        self._set_opacity(blink_opacity(self.settings.opacity, self._dimmed))

    def _set_opacity(self, opacity: float) -> bool:
        try:
            self.master.attributes("-alpha", opacity)
        except tk.TclError:
            return False
        return True

    def _on_completed(self, _snapshot: EngineSnapshot) -> None:
        if not self.alarm.play(self.settings.sound):
            self.master.bell()
        messagebox.showinfo(COMPLETION_TITLE, COMPLETION_MESSAGE, parent=self.master)
        self.alarm.stop()

    def quit(self) -> None:
        self._blinker.disarm()
        self.engine.reset()
        self.alarm.stop()
        self.master.destroy()

    def run(self) -> None:
        self.master.mainloop()


def main(settings: Optional[Settings] = None) -> None:
    settings = settings or Settings()
    root = tk.Tk()
    bar = SeekBarWindow(root, TimerEngine(settings.minutes), settings)
    bar.run()
