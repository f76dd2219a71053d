"""기본 UI 컴포넌트와 유틸리티 클래스"""

import tkinter as tk
from tkinter import ttk, messagebox
from typing import Optional, Callable, Dict
from abc import ABC, abstractmethod


class BaseUIComponent(ABC):
    """UI 컴포넌트의 기본 클래스"""

    def __init__(self, parent: tk.Widget):
        self.parent = parent
        self.frame = None
        self.callbacks: Dict[str, Callable] = {}

    @abstractmethod
    def create_widgets(self):
        """위젯들을 생성합니다."""
        pass

    @abstractmethod
    def setup_layout(self):
        """레이아웃을 설정합니다."""
        pass

    def build(self):
        self.create_widgets()
        self.setup_layout()
        return self

    def set_callback(self, event_name: str, callback: Callable):
        """콜백 함수를 설정합니다."""
        self.callbacks[event_name] = callback

    def trigger_callback(self, event_name: str, *args, **kwargs):
        """콜백 함수를 실행합니다."""
        if event_name in self.callbacks:
            return self.callbacks[event_name](*args, **kwargs)


class UIUtils:
    """UI 관련 유틸리티 함수들"""

    @staticmethod
    def create_labeled_entry(parent: tk.Widget, label_text: str,
                           width: int = 20, row: int = 0, column: int = 0,
                           sticky: str = "ew") -> tuple[ttk.Label, ttk.Entry]:
        """라벨과 엔트리를 함께 생성합니다."""
        label = ttk.Label(parent, text=label_text)
        label.grid(row=row, column=column, sticky="w", padx=(5, 2), pady=4)

        entry = ttk.Entry(parent, width=width)
        entry.grid(row=row, column=column+1, sticky=sticky, padx=(2, 5), pady=4)

        return label, entry

    @staticmethod
    def show_error_message(title: str, message: str, parent: Optional[tk.Widget] = None):
        """에러 메시지를 표시합니다."""
        messagebox.showerror(title, message, parent=parent)

    @staticmethod
    def show_warning_message(title: str, message: str, parent: Optional[tk.Widget] = None):
        messagebox.showwarning(title, message, parent=parent)

    @staticmethod
    def ask_yes_no(title: str, message: str, parent: Optional[tk.Widget] = None) -> bool:
        """예/아니오 확인 대화상자를 표시합니다."""
        return messagebox.askyesno(title, message, parent=parent)

    @staticmethod
    def ask_ok_cancel(title: str, message: str, parent: Optional[tk.Widget] = None) -> bool:
        return messagebox.askokcancel(title, message, parent=parent)

    @staticmethod
    def clear_widget_children(widget: tk.Widget):
        """위젯의 모든 자식 위젯을 제거합니다."""
        for child in widget.winfo_children():
            child.destroy()


class StyleManager:
    """UI 스타일을 관리하는 클래스"""

    DEFAULT_FONT = 'Malgun Gothic'

    COLOR_BG = "#F5F7FA"
    COLOR_SIDEBAR_BG = "#FFFFFF"
    COLOR_TEXT = "#343A40"
    COLOR_TEXT_SUBTLE = "#6C757D"
    COLOR_PRIMARY = "#0D6EFD"
    COLOR_SUCCESS = "#28A745"
    COLOR_DEFECT = "#DC3545"
    COLOR_DISABLED = "#CED4DA"
    COLOR_PAUSED = "#FFC107"

    def __init__(self):
        self.style = ttk.Style()

    def setup_default_styles(self):
        """기본 스타일들을 설정합니다."""
        self.style.theme_use('clam')
        self.style.configure('TFrame', background=self.COLOR_BG)
        self.style.configure('Card.TFrame', background=self.COLOR_SIDEBAR_BG, relief='solid', borderwidth=1)
        self.style.configure('TLabel', background=self.COLOR_BG, foreground=self.COLOR_TEXT, font=(self.DEFAULT_FONT, 12))
        self.style.configure('Card.TLabel', background=self.COLOR_SIDEBAR_BG, foreground=self.COLOR_TEXT, font=(self.DEFAULT_FONT, 12))
        self.style.configure('Header.TLabel', font=(self.DEFAULT_FONT, 14, 'bold'))
        self.style.configure('Title.TLabel', font=(self.DEFAULT_FONT, 28, 'bold'))
        self.style.configure('Value.TLabel', background=self.COLOR_SIDEBAR_BG, font=(self.DEFAULT_FONT, 22, 'bold'))
        self.style.configure('Subtle.TLabel', background=self.COLOR_SIDEBAR_BG, foreground=self.COLOR_TEXT_SUBTLE, font=(self.DEFAULT_FONT, 10))
        self.style.configure('Timer.TLabel', font=('Consolas', 20, 'bold'))
        self.style.configure('Pending.TLabel', background=self.COLOR_SIDEBAR_BG, foreground=self.COLOR_DEFECT, font=(self.DEFAULT_FONT, 14, 'bold'))

        self.style.configure('TButton', font=(self.DEFAULT_FONT, 12, 'bold'), padding=(12, 8), borderwidth=0)
        self.style.map('TButton', background=[('disabled', self.COLOR_DISABLED), ('!active', self.COLOR_PRIMARY), ('active', '#0B5ED7')],
                       foreground=[('disabled', self.COLOR_TEXT_SUBTLE), ('!active', 'white')])
        self.style.configure('Pass.TButton', font=(self.DEFAULT_FONT, 24, 'bold'))
        self.style.map('Pass.TButton', background=[('disabled', self.COLOR_DISABLED), ('!active', self.COLOR_SUCCESS), ('active', '#218838')])
        self.style.configure('Reject.TButton', font=(self.DEFAULT_FONT, 24, 'bold'))
        self.style.map('Reject.TButton', background=[('disabled', self.COLOR_DISABLED), ('!active', self.COLOR_DEFECT), ('active', '#C82333')])
        self.style.configure('Small.TButton', font=(self.DEFAULT_FONT, 10, 'bold'), padding=(4, 2))

        self.style.configure('Treeview.Heading', font=(self.DEFAULT_FONT, 11, 'bold'))
        self.style.configure('Treeview', rowheight=26, font=(self.DEFAULT_FONT, 11))

    def get_style(self) -> ttk.Style:
        """현재 스타일 객체를 반환합니다."""
        return self.style
