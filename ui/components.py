"""검사 화면 UI 컴포넌트들"""

import datetime
import tkinter as tk
from tkinter import ttk
from typing import List, Dict, Any, Optional

from core.models import LogEntry
from .base_ui import BaseUIComponent


class TimerControlComponent(BaseUIComponent):
    """재생/일시정지 버튼과 경과 시간 표시"""

    def __init__(self, parent: tk.Widget):
        super().__init__(parent)
        self.toggle_button: Optional[ttk.Button] = None
        self.time_label: Optional[ttk.Label] = None

    def create_widgets(self):
        self.frame = ttk.Frame(self.parent)
        self.toggle_button = ttk.Button(self.frame, text="▶ 시작", width=10,
                                        command=lambda: self.trigger_callback('toggle'))
        self.toggle_button.pack(side="left")
        self.time_label = ttk.Label(self.frame, text="00:00:00", style='Timer.TLabel')
        self.time_label.pack(side="left", padx=(10, 0))

    def setup_layout(self):
        self.frame.pack(side="left", padx=10)

    def update_display(self, formatted_time: str, is_playing: bool):
        if self.time_label:
            self.time_label.config(text=formatted_time)
        if self.toggle_button:
            self.toggle_button.config(text="❚❚ 일시정지" if is_playing else "▶ 시작")


class ViewToggleComponent(BaseUIComponent):
    """목록/격자 보기 전환과 불량명 언어 선택"""

    VIEWS = (("list", "목록"), ("grid", "격자"))

    def __init__(self, parent: tk.Widget, languages: List[str], view: str, language: str):
        super().__init__(parent)
        self.languages = languages
        self.view_var = tk.StringVar(value=view)
        self.language_var = tk.StringVar(value=language)

    def create_widgets(self):
        self.frame = ttk.Frame(self.parent)
        for value, text in self.VIEWS:
            ttk.Radiobutton(self.frame, text=text, value=value, variable=self.view_var,
                            command=lambda: self.trigger_callback('view_changed', self.view_var.get())).pack(side="left")
        combo = ttk.Combobox(self.frame, textvariable=self.language_var, values=self.languages,
                             state="readonly", width=10)
        combo.pack(side="left", padx=(10, 0))
        combo.bind('<<ComboboxSelected>>',
                   lambda e: self.trigger_callback('language_changed', self.language_var.get()))

    def setup_layout(self):
        self.frame.pack(side="left", padx=10)


class DefectListComponent(BaseUIComponent):
    """불량 항목 목록. 항목마다 누적 수량과 현재 제품의 선택 수량을 표시합니다."""

    def __init__(self, parent: tk.Widget, max_count: int = 99, grid_columns: int = 4):
        super().__init__(parent)
        self.max_count = max_count
        self.grid_columns = grid_columns
        self.container: Optional[ttk.Frame] = None
        self.pending_labels: Dict[str, ttk.Label] = {}
        self.total_labels: Dict[str, ttk.Label] = {}

    def create_widgets(self):
        self.frame = ttk.LabelFrame(self.parent, text="불량 항목", padding=5)
        canvas = tk.Canvas(self.frame, highlightthickness=0)
        scrollbar = ttk.Scrollbar(self.frame, orient="vertical", command=canvas.yview)
        self.container = ttk.Frame(canvas)
        self.container.bind("<Configure>", lambda e: canvas.configure(scrollregion=canvas.bbox("all")))
        canvas.create_window((0, 0), window=self.container, anchor="nw")
        canvas.configure(yscrollcommand=scrollbar.set)
        canvas.pack(side="left", fill="both", expand=True)
        scrollbar.pack(side="right", fill="y")

    def setup_layout(self):
        self.frame.pack(fill="both", expand=True)

    def render(self, names: List[str], view: str, totals: Dict[str, int], pending: Dict[str, int]):
        """불량 목록을 다시 그립니다."""
        for child in self.container.winfo_children():
            child.destroy()
        self.pending_labels.clear()
        self.total_labels.clear()

        columns = self.grid_columns if view == "grid" else 1
        for position, name in enumerate(names):
            index = str(position)
            card = ttk.Frame(self.container, style='Card.TFrame', padding=6)
            card.grid(row=position // columns, column=position % columns, sticky="ew", padx=3, pady=3)
            ttk.Label(card, text=name, style='Card.TLabel', width=24 if columns == 1 else 16).pack(side="left")
            total = ttk.Label(card, text=f"누적 {totals.get(index, 0)}", style='Subtle.TLabel', width=8)
            total.pack(side="left", padx=4)
            ttk.Button(card, text="−", style='Small.TButton', width=2,
                       command=lambda i=index: self._step(i, -1)).pack(side="left")
            count = ttk.Label(card, text=str(pending.get(index, 0)), style='Pending.TLabel', width=3, anchor="center")
            count.pack(side="left", padx=2)
            ttk.Button(card, text="+", style='Small.TButton', width=2,
                       command=lambda i=index: self._step(i, 1)).pack(side="left")
            self.pending_labels[index] = count
            self.total_labels[index] = total
        for column in range(columns):
            self.container.grid_columnconfigure(column, weight=1)

    def refresh_counts(self, totals: Dict[str, int], pending: Dict[str, int]):
        for index, label in self.pending_labels.items():
            label.config(text=str(pending.get(index, 0)))
        for index, label in self.total_labels.items():
            label.config(text=f"누적 {totals.get(index, 0)}")

    def _step(self, index: str, delta: int):
        current = int(self.pending_labels[index].cget('text'))
        new_value = max(0, min(self.max_count, current + delta))
        if new_value != current:
            self.trigger_callback('defect_selected', index, new_value)


class SummaryComponent(BaseUIComponent):
    """검사 수량 요약 카드"""

    CARDS = (
        ('checked_quantity', "검사 수량"),
        ('good_output', "양품"),
        ('defect_pieces', "불량품"),
        ('defect_rate', "불량률(%)"),
        ('dhu', "DHU"),
    )

    def __init__(self, parent: tk.Widget):
        super().__init__(parent)
        self.value_labels: Dict[str, ttk.Label] = {}

    def create_widgets(self):
        self.frame = ttk.Frame(self.parent)
        for column, (key, title) in enumerate(self.CARDS):
            card = ttk.Frame(self.frame, style='Card.TFrame', padding=10)
            card.grid(row=0, column=column, sticky="nsew", padx=5)
            ttk.Label(card, text=title, style='Subtle.TLabel').pack(anchor="w")
            value = ttk.Label(card, text="0", style='Value.TLabel')
            value.pack(anchor="w")
            self.value_labels[key] = value
            self.frame.grid_columnconfigure(column, weight=1)

    def setup_layout(self):
        self.frame.pack(fill="x", padx=10, pady=5)

    def update_summary(self, summary: Dict[str, Any]):
        for key, label in self.value_labels.items():
            label.config(text=str(summary.get(key, 0)))


class LogDisplayComponent(BaseUIComponent):
    """판정 기록 테이블 (최근 기록이 위에 표시)"""

    COLUMNS = ("번호", "시각", "판정", "불량 내역")

    def __init__(self, parent: tk.Widget, title: str = "검사 기록"):
        super().__init__(parent)
        self.title = title
        self.treeview: Optional[ttk.Treeview] = None
        self.scrollbar: Optional[ttk.Scrollbar] = None

    def create_widgets(self):
        self.frame = ttk.LabelFrame(self.parent, text=self.title, padding=5)

        tree_frame = ttk.Frame(self.frame)
        tree_frame.pack(fill="both", expand=True)

        self.treeview = ttk.Treeview(tree_frame, columns=self.COLUMNS, show="headings")
        self.scrollbar = ttk.Scrollbar(tree_frame, orient="vertical", command=self.treeview.yview)
        self.treeview.configure(yscrollcommand=self.scrollbar.set)

        widths = (50, 80, 60, 220)
        for col, width in zip(self.COLUMNS, widths):
            self.treeview.heading(col, text=col)
            self.treeview.column(col, width=width, anchor="center" if width < 100 else "w")
        self.treeview.tag_configure('reject', foreground='#DC3545')

        self.treeview.pack(side="left", fill="both", expand=True)
        self.scrollbar.pack(side="right", fill="y")

    def setup_layout(self):
        self.frame.pack(fill="both", expand=True, padx=10, pady=5)

    def add_entry(self, entry: LogEntry):
        if not self.treeview:
            return
        when = datetime.datetime.fromtimestamp(entry.timestamp / 1000).strftime('%H:%M:%S')
        defects = ", ".join(f"{d.name} x{d.count}" for d in entry.defect_details)
        self.treeview.insert("", 0, values=(entry.garment_no, when, entry.status, defects),
                             tags=(entry.type,))

    def set_entries(self, entries: List[LogEntry]):
        self.clear_items()
        for entry in entries:
            self.add_entry(entry)

    def clear_items(self):
        if self.treeview:
            for item in self.treeview.get_children():
                self.treeview.delete(item)
