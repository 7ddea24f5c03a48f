import logging
import queue
from typing import Optional

import tkinter as tk
from tkinter import messagebox, simpledialog
from tkinter import font as tkfont

from . import events
from .alarm import AlarmPlayer
from .config import Settings, remember_minutes
from .engine import EngineSnapshot, InvalidDuration, TimerEngine
from .events import Command, InputEvent
from .ticker import ThreadTicker
from .tray import TrayIcon
from .view import COMPLETION_MESSAGE, COMPLETION_TITLE, TROUGH_COLOR, percent_label, project

logger = logging.getLogger(__name__)


class ProgressCanvas(tk.Canvas):
    """Canvas progress bar filled in the colour of the current band."""

    def __init__(self, master: tk.Widget, *, font: tkfont.Font, height: int = 24) -> None:
        super().__init__(
            master,
            height=height,
            bg=TROUGH_COLOR,
            bd=2,
            relief="sunken",
            highlightthickness=0,
        )
        self._fraction = 0.0
        self._fill = TROUGH_COLOR
        self._label = percent_label(0.0)
        self._font = font
        self.bind("<Configure>", self._redraw)

    def set_progress(self, fraction: float, fill: str, label: Optional[str] = None) -> None:
        self._fraction = max(0.0, min(1.0, fraction))
        self._fill = fill
        if label is not None:
            self._label = label
        self._redraw()

    def _redraw(self, _event: Optional[tk.Event] = None) -> None:
        self.delete("all")
        width = max(self.winfo_width(), 1)
        height = max(self.winfo_height(), 1)
        fill_width = int(width * self._fraction)

        if fill_width > 0:
            self.create_rectangle(0, 0, fill_width, height, fill=self._fill, outline="")
            for stripe_x in range(fill_width % 12 - 12, fill_width, 12):
                if stripe_x + 6 > 0:
                    self.create_line(stripe_x + 6, 0, stripe_x + 6, height, fill=TROUGH_COLOR, stipple="gray50")

        self.create_text(
            width / 2,
            height / 2,
            text=self._label,
            fill="#000000" if fill_width > width * 0.45 else "#FFFFFF",
            font=self._font,
        )


class TimerWindow:
    """Small always-on-top window with a progress bar and timer controls.

    Ticks arrive on a background thread; anything that must touch Tk is
    queued and handled by the periodic refresh on the Tk thread.
    """

    WINDOW_BG = "#C0C0C0"
    FONT_FAMILY = "Tahoma"
    REFRESH_MS = 100

    def __init__(self, master: tk.Tk, engine: TimerEngine, settings: Optional[Settings] = None) -> None:
        self.master = master
        self.engine = engine
        self.settings = settings or Settings()
        self.alarm = AlarmPlayer()
        self._inbox: "queue.Queue[object]" = queue.Queue()
        self._closing = False

        self.master.title("Seekbar Timer")
        self.master.configure(bg=self.WINDOW_BG)
        self.master.geometry("400x110")
        self.master.resizable(False, False)
        self.master.attributes("-topmost", True)

        self.ticker = ThreadTicker()
        self.engine.attach_ticker(self.ticker)
        self.engine.add_completion_listener(self._on_completed)

        self._setup_fonts()
        self._build_widgets()
        self.tray = TrayIcon(
            on_show=lambda: self._inbox.put("show"),
            on_toggle=lambda: self._inbox.put(events.TOGGLE),
            on_reset=lambda: self._inbox.put(events.RESET),
            on_quit=lambda: self._inbox.put(events.QUIT),
        )
        self.tray.start()
        self._bind_events()
        self._refresh()

    def _setup_fonts(self) -> None:
        self.fonts = {
            "normal": tkfont.Font(family=self.FONT_FAMILY, size=10),
            "time": tkfont.Font(family=self.FONT_FAMILY, size=14, weight="bold"),
            "progress": tkfont.Font(family=self.FONT_FAMILY, size=9, weight="bold"),
        }

    def _build_widgets(self) -> None:
        top = tk.Frame(self.master, bg=self.WINDOW_BG)
        top.pack(fill="x", padx=8, pady=(8, 4))
        top.columnconfigure(0, weight=1)

        self.progress = ProgressCanvas(top, font=self.fonts["progress"], height=26)
        self.progress.grid(row=0, column=0, sticky="ew")

        self.time_var = tk.StringVar(value=project(self.engine.snapshot()).formatted_time)
        self.time_label = tk.Label(
            top,
            textvariable=self.time_var,
            font=self.fonts["time"],
            bg=self.WINDOW_BG,
            width=7,
        )
        self.time_label.grid(row=0, column=1, padx=(8, 0))

        buttons = tk.Frame(self.master, bg=self.WINDOW_BG)
        buttons.pack(fill="x", padx=8, pady=(0, 8))
        button_defs = [
            ("Start", events.START),
            ("Pause", events.PAUSE),
            ("Reset", events.RESET),
            ("Set Time", None),
            ("×", events.QUIT),
        ]
        for col, (text, event) in enumerate(button_defs):
            buttons.columnconfigure(col, weight=1)
            command = self._ask_duration if event is None else (lambda e=event: self.handle(e))
            tk.Button(buttons, text=text, font=self.fonts["normal"], command=command).grid(
                row=0, column=col, padx=2, sticky="ew"
            )

    def _bind_events(self) -> None:
        for keysym in events.WINDOW_KEYS:
            key = f"<{keysym}>" if len(keysym) > 1 else keysym
            self.master.bind(key, lambda e: self._on_key(e.keysym))
        if self.tray.running:
            self.master.protocol("WM_DELETE_WINDOW", self.master.withdraw)
        else:
            self.master.protocol("WM_DELETE_WINDOW", self.quit)

    def _on_key(self, keysym: str) -> None:
        event = events.event_for_key(events.WINDOW_KEYS, keysym)
        if event is not None:
            self.handle(event)

    def handle(self, event: InputEvent) -> None:
        if event.command is Command.RESET:
            self.alarm.stop()
        try:
            keep_running = events.dispatch(self.engine, event)
        except InvalidDuration as exc:
            messagebox.showwarning("Invalid Duration", str(exc), parent=self.master)
            return
        if not keep_running:
            self.quit()
            return
        self._render(self.engine.snapshot())

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

    def _on_completed(self, _snapshot: EngineSnapshot) -> None:
        # Called on the tick thread.
        self._inbox.put("completed")

    def _refresh(self) -> None:
        if self._closing:
            return
        while True:
            try:
                item = self._inbox.get_nowait()
            except queue.Empty:
                break
            if item == "completed":
                self._render(self.engine.snapshot())
                self._notify_completion()
            elif item == "show":
                self.master.deiconify()
                self.master.lift()
            elif isinstance(item, InputEvent):
                self.handle(item)
            if self._closing:
                return
        self._render(self.engine.snapshot())
        self.master.after(self.REFRESH_MS, self._refresh)

    def _render(self, snapshot: EngineSnapshot) -> None:
        render = project(snapshot)
        self.time_var.set(render.formatted_time)
        self.progress.set_progress(render.progress_fraction, render.color, percent_label(render.progress_fraction))
        self.tray.update(render)

    def _notify_completion(self) -> None:
        if not self.alarm.play(self.settings.sound):
            self.master.bell()
        messagebox.showinfo(COMPLETION_TITLE, COMPLETION_MESSAGE, parent=self.master)
        self.alarm.stop()

    def quit(self) -> None:
        self._closing = True
        self.engine.reset()
        self.alarm.stop()
        self.tray.stop()
        self.master.destroy()

    def run(self) -> None:
        self.master.mainloop()


def main(settings: Optional[Settings] = None) -> None:
    settings = settings or Settings()
    root = tk.Tk()
    window = TimerWindow(root, TimerEngine(settings.minutes), settings)
    window.run()
