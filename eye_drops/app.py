"""
Eye Drops — tray reminder app
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

Reminds you to use your eye drops every N minutes between a start and an
end time. Each reminder is logged as pending until you press Done or
Snooze. Reminders that were running when the app closed resume on the
next launch if their time is still ahead.

Usage:
    eye-drops
    eye-drops --test          (1-minute interval, 5 s polling)
    python -m eye_drops --data-dir ./data --log-level DEBUG
"""
from __future__ import annotations

import argparse
import dataclasses
import datetime
import platform
import sys
import threading
from typing import Any, Callable, Optional

# ─── tkinter check ────────────────────────────────────────────
try:
    import tkinter as tk
    from tkinter import messagebox
except ImportError:
    _s = platform.system()
    print("Error: tkinter is required.")
    if _s == "Darwin":
        print("  brew install python-tk@3.12  (or use python.org installer)")
    elif _s == "Linux":
        print("  sudo apt install python3-tk")
    sys.exit(1)

from loguru import logger
from PIL import ImageTk

try:
    import pystray
    HAS_TRAY = True
except ImportError:
    HAS_TRAY = False

from eye_drops.history import EntryStatus, HistoryEntry
from eye_drops.icon import create_drop_icon
from eye_drops.log import setup_logging
from eye_drops.reminder import POLL_SECONDS, SNOOZE_MINUTES, ReminderStateMachine
from eye_drops.sound import IS_MAC, IS_WIN, play_chime
from eye_drops.status import (NO_HISTORY, describe_next, format_row, status_text,
                              today_rows)
from eye_drops.storage import DATA_DIR, JsonFileStore
from eye_drops.window import WindowConfig, fmt12

FONT = "Helvetica Neue" if IS_MAC else "Segoe UI" if IS_WIN else "DejaVu Sans"
MONO = "Menlo" if IS_MAC else "Consolas" if IS_WIN else "DejaVu Sans Mono"

# ─── Named Constants ─────────────────────────────────────────
TEST_POLL_SECONDS = 5
CHIME_REPEAT_MS = 2000             # Chime again every 2 s until the popup is answered
REFRESH_MS = 30_000                # Status window refresh (catches day rollover)

# ─── Colours (nord) ───────────────────────────────────────────
C_BG       = "#2e3440";  C_CARD     = "#3b4252";  C_CARD_IN  = "#434c5e"
C_ACCENT2  = "#88c0d0"
C_BTN_PRI  = "#5e81ac";  C_BTN_SEC  = "#4c566a"
C_TEXT     = "#eceff4";  C_TEXT_DIM = "#d8dee9";  C_TEXT_MUT = "#a3be8c"
C_OK       = "#a3be8c";  C_ERR      = "#bf616a";  C_PEND     = "#ebcb8b"

STATUS_COLOURS = {
    EntryStatus.COMPLETED: C_OK,
    EntryStatus.SNOOZED: C_ACCENT2,
    EntryStatus.PENDING: C_PEND,
}


class TkPollTimer:
    """PollTimer on top of the tkinter event loop."""

    def __init__(self, root: tk.Misc):
        self.root = root

    def schedule(self, delay_seconds: float, callback: Callable[[], None]) -> str:
        return self.root.after(int(delay_seconds * 1000), callback)

    def cancel(self, handle: str) -> None:
        try:
            self.root.after_cancel(handle)
        except (tk.TclError, ValueError):
            pass


# ━━━ Alert popup ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
class PopupPresenter:
    """Shows a fired reminder as a topmost popup, a tray notification and a chime."""

    def __init__(self, app: EyeDropsApp):
        self.app = app
        self._win: Optional[tk.Toplevel] = None
        self._chime_id: Optional[str] = None

    def present(self, entry: HistoryEntry) -> None:
        self.close()
        root = self.app.root
        win = tk.Toplevel(root)
        win.title("Eye Drops")
        win.attributes("-topmost", True)
        win.configure(bg=C_CARD)
        win.protocol("WM_DELETE_WINDOW", self.close)
        self.app.centre(win, 380, 200)

        tk.Label(win, text="💧  Eye drops time", font=(FONT, 16, "bold"),
                 fg=C_ACCENT2, bg=C_CARD).pack(pady=(22, 4))
        tk.Label(win, text=f"It's {entry.time_string} - time to use your eye drops!",
                 font=(FONT, 11), fg=C_TEXT_DIM, bg=C_CARD).pack(pady=(0, 16))

        row = tk.Frame(win, bg=C_CARD);  row.pack()
        self.app.button(row, "✓ Done", C_BTN_PRI, self._done, bold=True).pack(side="left", padx=6)
        self.app.button(row, f"⏰ Snooze {SNOOZE_MINUTES} min", C_BTN_SEC,
                        self._snooze).pack(side="left", padx=6)

        if IS_MAC:
            win.lift()
        win.focus_force()
        self._win = win

        self.app.notify(f"It's {entry.time_string} - time to use your eye drops!")
        if self.app.machine.config.sound_enabled:
            self._chime()

    def _chime(self) -> None:
        play_chime()
        self._chime_id = self.app.root.after(CHIME_REPEAT_MS, self._chime)

    def _done(self) -> None:
        self.close()
        self.app.machine.acknowledge()

    def _snooze(self) -> None:
        self.close()
        self.app.machine.snooze(self.app.machine.clock())

    def close(self) -> None:
        if self._chime_id:
            try:
                self.app.root.after_cancel(self._chime_id)
            except (tk.TclError, ValueError):
                pass
            self._chime_id = None
        if self._win:
            try:
                self._win.destroy()
            except tk.TclError:
                pass
            self._win = None


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
class EyeDropsApp:

    def __init__(self, store: JsonFileStore, test_mode: bool = False):
        self.root = tk.Tk()
        self.root.withdraw()
        self.test_mode = test_mode

        self.presenter = PopupPresenter(self)
        self.machine = ReminderStateMachine.load(
            store, self.presenter, datetime.datetime.now(),
            timer=TkPollTimer(self.root),
            poll_seconds=TEST_POLL_SECONDS if test_mode else POLL_SECONDS)
        if test_mode:
            # Not saved: the user's own interval survives a test run
            self.machine.config = dataclasses.replace(self.machine.config, interval_minutes=1)
        self.machine.subscribe(self._on_change)

        self._status_win: Optional[tk.Toplevel] = None
        self._icon_photo = ImageTk.PhotoImage(create_drop_icon(64))
        self.root.iconphoto(True, self._icon_photo)

        self.tray: Any = None
        if HAS_TRAY:
            self.tray = self._create_tray()
            threading.Thread(target=self.tray.run, daemon=True).start()

        self._print_schedule()
        self._show_status_window()
        self._refresh_loop()

    def run(self) -> None:
        self.root.mainloop()

    # ━━━ Helpers ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def centre(self, win: tk.Toplevel, w: int, h: int) -> None:
        sw, sh = win.winfo_screenwidth(), win.winfo_screenheight()
        win.geometry(f"{w}x{h}+{(sw - w) // 2}+{(sh - h) // 3}")

    def button(self, p: tk.Frame, text: str, bg: str, cmd: Callable, bold: bool = False) -> tk.Button:
        return tk.Button(p, text=text, font=(FONT, 10, "bold" if bold else "normal"),
                         bg=bg, fg=C_TEXT, activebackground=bg, activeforeground=C_TEXT,
                         relief="flat", padx=14, pady=6, cursor="hand2", command=cmd)

    def notify(self, message: str) -> None:
        if self.tray is not None and getattr(self.tray, "HAS_NOTIFICATION", False):
            self.tray.notify(message, "Eye Drops Reminder")

    def _print_schedule(self):
        cfg = self.machine.config
        try:
            print()
            print("  +-----------------------------------------------+")
            print("  |          Eye Drops -- Schedule                 |")
            print("  +-----------------------------------------------+")
            print(f"  |  From {fmt12(cfg.start_minute):>8s}  to {fmt12(cfg.end_minute):>8s}"
                  f"                   |")
            print(f"  |  Every {cfg.interval_minutes:>3d} min"
                  f"{'   (test mode)' if self.test_mode else '':<14s}"
                  f"             |")
            print(f"  |  Sound: {'on' if cfg.sound_enabled else 'off':<38s}|")
            print("  +-----------------------------------------------+")
            if not HAS_TRAY:
                print("\n  [!] No tray icon (pystray not available).")
            print()
        except (UnicodeEncodeError, OSError):
            pass  # consoles that can't print

    # ━━━ Status & Settings window ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def _show_status_window(self) -> None:
        if self._status_win:
            try:
                self._status_win.deiconify();  self._status_win.lift();  self._status_win.focus_force()
                return
            except tk.TclError:
                self._status_win = None

        win = tk.Toplevel(self.root)
        win.title("Eye Drops — Status & Settings")
        win.configure(bg=C_BG);  win.resizable(False, True)
        win.protocol("WM_DELETE_WINDOW", self._close_status)
        self._status_win = win
        pad = dict(padx=20)

        # ══════ STATUS ══════
        card = tk.Frame(win, bg=C_CARD, padx=14, pady=10);  card.pack(fill="x", pady=(14, 6), **pad)
        self._status_var = tk.StringVar()
        self._status_lbl = tk.Label(card, textvariable=self._status_var, font=(FONT, 14, "bold"),
                                    bg=C_CARD, anchor="w")
        self._status_lbl.pack(fill="x")
        self._next_var = tk.StringVar()
        tk.Label(card, textvariable=self._next_var, font=(MONO, 11), fg=C_TEXT_DIM,
                 bg=C_CARD, anchor="w").pack(fill="x", pady=(4, 0))

        # ══════ CONTROL BUTTONS ══════
        ctrl = tk.Frame(win, bg=C_BG);  ctrl.pack(fill="x", pady=6, **pad)
        self._start_btn = self.button(ctrl, "▶ Start", C_BTN_PRI, self._start, bold=True)
        self._start_btn.pack(side="left", padx=(0, 6))
        self._stop_btn = self.button(ctrl, "■ Stop", C_BTN_SEC, self.machine.stop)
        self._stop_btn.pack(side="left", padx=(0, 6))
        self.button(ctrl, "🔔 Test", C_BTN_SEC, self._test).pack(side="left")

        # ══════ SETTINGS ══════
        tk.Label(win, text="Settings", font=(FONT, 11, "bold"), fg=C_TEXT,
                 bg=C_BG, anchor="w").pack(fill="x", pady=(10, 2), **pad)
        sf = tk.Frame(win, bg=C_CARD, padx=14, pady=10);  sf.pack(fill="x", **pad)
        cfg = self.machine.config

        def row(r: int, label: str) -> None:
            tk.Label(sf, text=label, font=(FONT, 10), fg=C_TEXT_DIM, bg=C_CARD,
                     anchor="w").grid(row=r, column=0, sticky="w", pady=3)

        row(0, "Start time (HH:MM)")
        self._ws_entry = tk.Entry(sf, width=8, font=(MONO, 10), bg=C_CARD_IN, fg=C_TEXT,
                                  insertbackground=C_TEXT, relief="flat")
        self._ws_entry.insert(0, cfg.start_time);  self._ws_entry.grid(row=0, column=1, sticky="w")
        row(1, "End time (HH:MM)")
        self._we_entry = tk.Entry(sf, width=8, font=(MONO, 10), bg=C_CARD_IN, fg=C_TEXT,
                                  insertbackground=C_TEXT, relief="flat")
        self._we_entry.insert(0, cfg.end_time);  self._we_entry.grid(row=1, column=1, sticky="w")
        row(2, "Interval (min)")
        self._iv_spin = tk.Spinbox(sf, from_=1, to=720, width=6, font=(MONO, 10),
                                   bg=C_CARD_IN, fg=C_TEXT, relief="flat")
        self._iv_spin.delete(0, "end");  self._iv_spin.insert(0, str(cfg.interval_minutes))
        self._iv_spin.grid(row=2, column=1, sticky="w")
        self._sound_var = tk.BooleanVar(value=cfg.sound_enabled)
        tk.Checkbutton(sf, text="Play sound", variable=self._sound_var, font=(FONT, 10),
                       fg=C_TEXT_DIM, bg=C_CARD, selectcolor=C_CARD_IN,
                       activebackground=C_CARD).grid(row=3, column=0, columnspan=2, sticky="w", pady=3)

        sb = tk.Frame(win, bg=C_BG);  sb.pack(fill="x", pady=6, **pad)
        self.button(sb, "Save", C_BTN_PRI, self._apply_settings).pack(side="left")
        self._save_fb = tk.StringVar()
        self._save_lbl = tk.Label(sb, textvariable=self._save_fb, font=(FONT, 9), fg=C_TEXT_MUT,
                                  bg=C_BG)
        self._save_lbl.pack(side="left", padx=10)

        # ══════ TODAY'S HISTORY ══════
        hh = tk.Frame(win, bg=C_BG);  hh.pack(fill="x", pady=(10, 2), **pad)
        tk.Label(hh, text="Today", font=(FONT, 11, "bold"), fg=C_TEXT, bg=C_BG).pack(side="left")
        self.button(hh, "Clear history", C_BTN_SEC, self._clear_history).pack(side="right")
        self._hist_frame = tk.Frame(win, bg=C_CARD, padx=14, pady=8)
        self._hist_frame.pack(fill="both", expand=True, pady=(0, 16), **pad)

        self._update_status()

    def _close_status(self) -> None:
        if not HAS_TRAY:
            self._quit()
            return
        if self._status_win:
            try:
                self._status_win.withdraw()
            except tk.TclError:
                self._status_win = None

    def _update_status(self) -> None:
        if not self._status_win:
            return
        try:
            if not self._status_win.winfo_exists():
                self._status_win = None
                return
        except tk.TclError:
            self._status_win = None
            return

        m = self.machine
        self._status_var.set(f"● {status_text(m.active)}")
        self._status_lbl.config(fg=C_OK if m.active else C_TEXT_MUT)
        self._next_var.set(describe_next(m.next_trigger))
        self._start_btn.config(state="disabled" if m.active else "normal")
        self._stop_btn.config(state="normal" if m.active else "disabled")

        for child in self._hist_frame.winfo_children():
            child.destroy()
        rows = today_rows(m.history, datetime.date.today())
        if not rows:
            tk.Label(self._hist_frame, text=NO_HISTORY, font=(FONT, 10, "italic"),
                     fg=C_TEXT_MUT, bg=C_CARD).pack(anchor="w")
        for entry in rows:
            tk.Label(self._hist_frame, text=format_row(entry), font=(MONO, 10),
                     fg=STATUS_COLOURS[entry.status], bg=C_CARD, anchor="w").pack(fill="x")

    def _refresh_loop(self) -> None:
        self._update_status()
        self.root.after(REFRESH_MS, self._refresh_loop)

    def _on_change(self) -> None:
        self._update_status()
        self._update_tray()

    # ━━━ Actions ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def _start(self) -> None:
        self.machine.start(self.machine.clock())

    def _test(self) -> None:
        self.machine.test_reminder(self.machine.clock())

    def _apply_settings(self) -> None:
        try:
            interval = int(self._iv_spin.get())
            cfg = WindowConfig.from_times(self._ws_entry.get(), self._we_entry.get(),
                                          interval, bool(self._sound_var.get()))
        except ValueError as e:
            self._save_fb.set(f"⚠ {e}");  self._save_lbl.config(fg=C_ERR)
            return
        self.machine.config_changed(cfg)
        self._save_fb.set("✓ Saved");  self._save_lbl.config(fg=C_OK)
        logger.info("Settings saved: {}-{} every {} min", cfg.start_time, cfg.end_time,
                    cfg.interval_minutes)

    def _clear_history(self) -> None:
        if messagebox.askyesno("Eye Drops", "Clear all history?", parent=self._status_win):
            self.machine.clear_history()

    # ━━━ System Tray ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def _create_tray(self) -> Any:
        menu = pystray.Menu(
            # Hidden default item for left-click
            pystray.MenuItem("Open", lambda icon, item: self.root.after(0, self._show_status_window),
                             default=True, visible=False),
            pystray.MenuItem("Eye Drops",
                lambda icon, item: self.root.after(0, self._show_status_window)),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem(
                lambda item: "■  Stop" if self.machine.active else "▶  Start",
                lambda icon, item: self.root.after(0, self._toggle_active)),
            pystray.MenuItem("🔔  Test reminder",
                lambda icon, item: self.root.after(0, self._test)),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem("Quit", lambda icon, item: self.root.after(0, self._quit)),
        )
        return pystray.Icon("eye_drops", create_drop_icon(64, inactive=not self.machine.active),
                            self._tray_title(), menu)

    def _tray_title(self) -> str:
        if not self.machine.active:
            return "Eye Drops (stopped)"
        return f"Eye Drops — {describe_next(self.machine.next_trigger)}"

    def _update_tray(self) -> None:
        if self.tray is None:
            return
        self.tray.icon = create_drop_icon(64, inactive=not self.machine.active)
        self.tray.title = self._tray_title()
        self.tray.update_menu()

    def _toggle_active(self) -> None:
        if self.machine.active:
            self.machine.stop()
        else:
            self._start()

    def _quit(self) -> None:
        self.presenter.close()
        if self.tray is not None:
            self.tray.stop()
        self.root.after(0, self.root.quit)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
def _enable_dpi_awareness() -> None:
    """High-DPI awareness for crisp rendering on Windows."""
    import ctypes
    try:
        ctypes.windll.shcore.SetProcessDpiAwareness(1)
    except (AttributeError, OSError):
        ctypes.windll.user32.SetProcessDPIAware()


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Eye drops reminder")
    parser.add_argument("--test", action="store_true", help="Use a 1-minute interval for testing")
    parser.add_argument("--data-dir", default=DATA_DIR,
                        help="Where settings, state and history are kept (default: home)")
    parser.add_argument("--log-level", default="INFO", help="Console log level")
    parser.add_argument("--log-file", default=None, help="Also log to this file")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    if IS_WIN:
        _enable_dpi_awareness()
    if args.test:
        print("\n  [!] TEST MODE: 1 min interval, polling every 5 s\n")
    EyeDropsApp(JsonFileStore(args.data_dir), test_mode=args.test).run()


if __name__ == "__main__":
    main()
