"""Tkinter desktop host for the raga explorer, daily pick and care tracker."""

from __future__ import annotations

import logging
import tkinter as tk
from datetime import date
from tkinter import ttk
from typing import Any

from ..application.bootstrap import AppServices
from ..application.players import DailyListeningPlayer, HeroBackgroundPlayer, RagaExplorerPlayer
from ..application.ports import MountTarget
from ..config import AppConfig
from ..domain.care import INSTRUMENT_TYPES, CareRecord
from ..domain.playback import PlaybackSession, PlaybackState, ProgressEntry
from ..domain.ragas import RAGA_MEDIA, format_timestamp

logger = logging.getLogger(__name__)

_WINDOW_TITLE = "House of Swar"


def describe_session(session: PlaybackSession) -> str:
    """One-line status for a playback snapshot."""
    if session.state == PlaybackState.ERROR:
        return "Playback unavailable."
    if session.state == PlaybackState.UNSTARTED:
        return "Loading player..."
    position = format_timestamp(session.position_seconds)
    total = format_timestamp(session.duration_seconds)
    muted = " (muted)" if session.is_muted else ""
    return f"{session.state.value.capitalize()} {position} / {total}{muted}"


def describe_progress(entry: ProgressEntry) -> str:
    return f"{format_timestamp(entry.position_seconds)} / {format_timestamp(entry.duration_seconds)}"


class SwarDesktopApp:
    def __init__(
        self,
        config: AppConfig,
        services: AppServices,
        *,
        logger_instance=None,
        owner_id: str = "guest",
        root: tk.Tk | None = None,
    ) -> None:
        self.config = config
        self.services = services
        self.logger = logger_instance or logger
        self.owner_id = owner_id
        self.root = root
        self.hero: HeroBackgroundPlayer | None = None
        self.explorer: RagaExplorerPlayer | None = None
        self.daily: DailyListeningPlayer | None = None
        self.status_var: tk.StringVar | None = None
        self.raga_listbox: tk.Listbox | None = None
        self.raga_progress_var: tk.StringVar | None = None
        self.daily_status_var: tk.StringVar | None = None
        self.care_tree: ttk.Treeview | None = None
        self._care_inputs: dict[str, Any] = {}
        self._care_records: dict[str, CareRecord] = {}
        self._seek_programmatic = False
        self.seek_var: tk.DoubleVar | None = None
        self.daily_seek_var: tk.DoubleVar | None = None
        self._daily_frame: ttk.Frame | None = None

    def build(self) -> tk.Tk:
        if self.root is None:
            self.root = tk.Tk()
        self.root.title(_WINDOW_TITLE)
        self.root.geometry("720x560")
        self.root.protocol("WM_DELETE_WINDOW", self.close)
        self.status_var = tk.StringVar(master=self.root, value="Ready.")

        hero_frame = tk.Frame(self.root, height=180, background="#0b1f17")
        hero_frame.pack(fill="x")
        hero_frame.update_idletasks()
        hero_controls = ttk.Frame(self.root)
        hero_controls.pack(fill="x", padx=8, pady=(4, 0))
        ttk.Button(hero_controls, text="Hero play / pause", command=self._on_hero_toggle).pack(side="left")
        ttk.Button(hero_controls, text="Hero mute", command=self._on_hero_mute).pack(side="left", padx=4)

        notebook = ttk.Notebook(self.root)
        notebook.pack(fill="both", expand=True, padx=8, pady=8)
        notebook.add(self._build_explorer_tab(notebook), text="Ragas")
        notebook.add(self._build_daily_tab(notebook), text="Today")
        notebook.add(self._build_care_tab(notebook), text="Care")
        ttk.Label(self.root, textvariable=self.status_var, anchor="w").pack(fill="x", padx=8, pady=(0, 6))

        library = self.services.player_library
        self.hero = HeroBackgroundPlayer(
            MountTarget("hero-video", hero_frame.winfo_id()),
            library=library,
            scheduler=self.root,
            config=self.config,
            logger_instance=self.logger,
        )
        self.explorer = RagaExplorerPlayer(
            MountTarget("raga-audio"),
            library=library,
            scheduler=self.root,
            config=self.config,
            logger_instance=self.logger,
        )
        self.explorer.on_change(self._on_explorer_change)
        self.daily = DailyListeningPlayer(
            MountTarget("daily-audio"),
            library=library,
            scheduler=self.root,
            config=self.config,
            logger_instance=self.logger,
        )
        self.daily.on_change(self._on_daily_change)
        self._populate_daily_tab()
        for player in (self.hero, self.explorer, self.daily):
            player.mount()
        self._refresh_care()
        return self.root

    def launch(self) -> None:
        root = self.build()
        self.logger.info("Desktop window opened")
        try:
            root.mainloop()
        finally:
            self.close()

    def close(self) -> None:
        for player in (self.hero, self.explorer, self.daily):
            if player is not None:
                player.unmount()
        if self.root is not None:
            root = self.root
            self.root = None
            try:
                root.destroy()
            except tk.TclError:
                self.logger.debug("Window already destroyed")

    # Hero

    def _on_hero_toggle(self) -> None:
        if self.hero is not None:
            self.hero.toggle_play_pause()

    def _on_hero_mute(self) -> None:
        if self.hero is not None:
            self.hero.toggle_mute()

    # Raga explorer

    def _build_explorer_tab(self, parent) -> ttk.Frame:
        frame = ttk.Frame(parent, padding=8)
        self.raga_listbox = tk.Listbox(frame, height=12, exportselection=False)
        for raga_id in RAGA_MEDIA:
            self.raga_listbox.insert(tk.END, raga_id)
        self.raga_listbox.pack(fill="both", expand=True)
        self.raga_listbox.bind("<Double-Button-1>", lambda _event: self._on_play_selected())
        self.raga_listbox.bind("<<ListboxSelect>>", lambda _event: self._render_raga_progress())

        controls = ttk.Frame(frame)
        controls.pack(fill="x", pady=(6, 0))
        ttk.Button(controls, text="Play / Pause", command=self._on_play_selected).pack(side="left")
        ttk.Button(controls, text="Mute", command=lambda: self.explorer and self.explorer.toggle_mute()).pack(
            side="left", padx=4
        )
        self.raga_progress_var = tk.StringVar(master=frame, value="0:00 / 0:00")
        ttk.Label(controls, textvariable=self.raga_progress_var).pack(side="right")

        self.seek_var = tk.DoubleVar(master=frame, value=0.0)
        ttk.Scale(
            frame,
            from_=0.0,
            to=1.0,
            variable=self.seek_var,
            command=self._on_seek_change,
        ).pack(fill="x", pady=(6, 0))
        return frame

    def _selected_raga(self) -> str | None:
        if self.raga_listbox is None:
            return None
        selected = self.raga_listbox.curselection()
        if not selected:
            return None
        return str(self.raga_listbox.get(selected[0]))

    def _on_play_selected(self) -> None:
        raga_id = self._selected_raga()
        if raga_id is None or self.explorer is None:
            self._set_status("Select a raga first.")
            return
        if not self.explorer.play_raga(raga_id):
            self._set_status(f"Cannot play {raga_id} yet.")

    def _on_seek_change(self, value: str) -> None:
        if self._seek_programmatic or self.explorer is None:
            return
        raga_id = self._selected_raga()
        if raga_id is None:
            return
        try:
            fraction = float(value)
        except ValueError:
            return
        self.explorer.seek(raga_id, fraction)

    def _on_explorer_change(self, session: PlaybackSession) -> None:
        self._render_raga_progress()
        self._set_status(describe_session(session))

    def _render_raga_progress(self) -> None:
        """Show progress for the selected raga, falling back to the loaded one."""
        if self.explorer is None or self.explorer.controller is None:
            return
        raga_id = self._selected_raga() or self.explorer.raga_for_media(self.explorer.controller.media_ref)
        if raga_id is None:
            return
        entry = self.explorer.progress_view(raga_id)
        if self.raga_progress_var is not None:
            self.raga_progress_var.set(f"{raga_id}: {describe_progress(entry)}")
        if self.seek_var is not None:
            self._seek_programmatic = True
            try:
                self.seek_var.set(entry.fraction)
            finally:
                self._seek_programmatic = False

    # Daily listening

    def _build_daily_tab(self, parent) -> ttk.Frame:
        frame = ttk.Frame(parent, padding=8)
        self.daily_status_var = tk.StringVar(master=frame, value="")
        self._daily_frame = frame
        return frame

    def _on_daily_change(self, session: PlaybackSession) -> None:
        if self.daily_status_var is not None:
            self.daily_status_var.set(describe_session(session))
        if self.daily_seek_var is not None:
            self._seek_programmatic = True
            try:
                self.daily_seek_var.set(session.progress_fraction())
            finally:
                self._seek_programmatic = False

    def _on_daily_seek_change(self, value: str) -> None:
        if self._seek_programmatic or self.daily is None:
            return
        try:
            fraction = float(value)
        except ValueError:
            return
        self.daily.seek(fraction)

    def _populate_daily_tab(self) -> None:
        if self.daily is None or self._daily_frame is None:
            return
        frame = self._daily_frame
        pick = self.daily.session
        ttk.Label(frame, text=pick.mood, font=("Segoe UI", 14, "bold")).pack(anchor="w")
        ttk.Label(frame, text=pick.raga).pack(anchor="w")
        ttk.Label(frame, text=pick.description, wraplength=520).pack(anchor="w", pady=(4, 8))
        row = ttk.Frame(frame)
        row.pack(fill="x")
        ttk.Button(row, text="Play / Pause", command=self.daily.toggle_play_pause).pack(side="left")
        ttk.Label(row, textvariable=self.daily_status_var).pack(side="left", padx=8)
        self.daily_seek_var = tk.DoubleVar(master=frame, value=0.0)
        ttk.Scale(
            frame,
            from_=0.0,
            to=1.0,
            variable=self.daily_seek_var,
            command=self._on_daily_seek_change,
        ).pack(fill="x", pady=(6, 0))

    # Care tracker

    def _build_care_tab(self, parent) -> ttk.Frame:
        frame = ttk.Frame(parent, padding=8)
        columns = ("type", "name", "purchased", "warranty", "tuning")
        self.care_tree = ttk.Treeview(frame, columns=columns, show="headings", height=8)
        for column in columns:
            self.care_tree.heading(column, text=column.capitalize())
        self.care_tree.pack(fill="both", expand=True)
        self.care_tree.bind("<<TreeviewSelect>>", lambda _event: self._on_care_select())

        form = ttk.Frame(frame)
        form.pack(fill="x", pady=(6, 0))
        type_var = tk.StringVar(master=frame, value=INSTRUMENT_TYPES[0])
        name_var = tk.StringVar(master=frame)
        date_var = tk.StringVar(master=frame, value=date.today().isoformat())
        location_var = tk.StringVar(master=frame)
        ttk.Combobox(form, textvariable=type_var, values=INSTRUMENT_TYPES, width=10, state="readonly").pack(
            side="left"
        )
        ttk.Entry(form, textvariable=name_var, width=18).pack(side="left", padx=4)
        ttk.Entry(form, textvariable=date_var, width=11).pack(side="left")
        ttk.Entry(form, textvariable=location_var, width=14).pack(side="left", padx=4)
        ttk.Button(form, text="Add", command=self._on_care_add).pack(side="left")
        ttk.Button(form, text="Update", command=self._on_care_update).pack(side="left", padx=(4, 0))
        ttk.Button(form, text="Delete", command=self._on_care_delete).pack(side="left", padx=4)
        self._care_inputs = {
            "instrument_type": type_var,
            "instrument_name": name_var,
            "purchase_date": date_var,
            "purchase_location": location_var,
        }
        return frame

    def _refresh_care(self) -> None:
        if self.care_tree is None:
            return
        self.care_tree.delete(*self.care_tree.get_children())
        service = self.services.care_service
        try:
            records = service.list_instruments(self.owner_id)
        except Exception:
            self.logger.exception("Failed to load care records")
            self._set_status("Failed to load your instruments.")
            return
        self._care_records = {record.record_id: record for record in records}
        for record in records:
            warranty, tuning = service.status_for(record)
            self.care_tree.insert(
                "",
                tk.END,
                iid=record.record_id,
                values=(
                    record.instrument_type,
                    record.instrument_name,
                    record.purchase_date.isoformat(),
                    f"{'Active' if warranty.is_active else 'Expired'} {warranty.expiry_date.isoformat()}",
                    f"{'Due' if tuning.is_due else 'Next'} {tuning.next_date.isoformat()}",
                ),
            )

    def _on_care_add(self) -> None:
        values = {key: var.get() for key, var in self._care_inputs.items()}
        try:
            self.services.care_service.register_instrument(self.owner_id, **values)
        except ValueError as exc:
            self._set_status(str(exc))
            return
        self._care_inputs["instrument_name"].set("")
        self._set_status("Instrument registered.")
        self._refresh_care()

    def _on_care_delete(self) -> None:
        if self.care_tree is None:
            return
        selected = self.care_tree.selection()
        if not selected:
            self._set_status("Select an instrument first.")
            return
        try:
            for record_id in selected:
                self.services.care_service.remove_instrument(record_id, self.owner_id)
        except Exception:
            self.logger.exception("Failed to remove care records: %s", ", ".join(selected))
            self._set_status("Failed to remove the selected instrument.")
            self._refresh_care()
            return
        self._set_status(f"Removed {len(selected)} instrument(s).")
        self._refresh_care()

    def _selected_care_record(self) -> CareRecord | None:
        if self.care_tree is None:
            return None
        selected = self.care_tree.selection()
        if len(selected) != 1:
            return None
        return self._care_records.get(selected[0])

    def _on_care_select(self) -> None:
        record = self._selected_care_record()
        if record is None or not self._care_inputs:
            return
        self._care_inputs["instrument_type"].set(record.instrument_type)
        self._care_inputs["instrument_name"].set(record.instrument_name)
        self._care_inputs["purchase_date"].set(record.purchase_date.isoformat())
        self._care_inputs["purchase_location"].set(record.purchase_location or "")

    def _on_care_update(self) -> None:
        record = self._selected_care_record()
        if record is None:
            self._set_status("Select one instrument to update.")
            return
        values = {key: var.get() for key, var in self._care_inputs.items()}
        try:
            self.services.care_service.update_instrument(record.record_id, self.owner_id, **values)
        except (ValueError, LookupError) as exc:
            self._set_status(str(exc))
            return
        self._set_status("Instrument updated.")
        self._refresh_care()

    def _set_status(self, message: str) -> None:
        if self.status_var is not None:
            self.status_var.set(message)
