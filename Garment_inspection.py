import tkinter as tk
from tkinter import ttk
import datetime
import os
import re
import sys
import uuid
from typing import Dict, Optional

import pygame
from PIL import Image, ImageTk

# 분리된 모듈들 import
from core.catalog import JsonDefectCatalog
from core.models import InspectionDetails, SessionState, LOG_TYPE_PASS
from core.report import ReportRenderer, build_summary
from core.session import InspectionSession, format_elapsed
from core.timer import SessionTimer
from utils.config import ConfigManager
from utils.exceptions import InspectionError, ConfigurationError, UnknownDefectError
from utils.file_handler import resource_path, ensure_directory_exists, get_safe_filename, get_daily_folder_path
from utils.logger import EventLogger
from utils.state_store import JsonStateStore
from ui.base_ui import UIUtils, StyleManager
from ui.components import (
    TimerControlComponent, ViewToggleComponent, DefectListComponent,
    SummaryComponent, LogDisplayComponent,
)

# 전역 설정 매니저 인스턴스
config = ConfigManager()


class GarmentInspectionApp:
    """봉제 완제품 품질 검사를 위한 메인 GUI 어플리케이션 클래스입니다."""
    AUTOSAVE_INTERVAL_SEC = 30

    def __init__(self):
        self.root = tk.Tk()
        app_title = f"{config.get('ui.window_title', '봉제 품질 검사')} ({config.get('app.version', 'v1.0.0')})"
        self.root.title(app_title)
        self.root.geometry(config.get('ui.window_geometry', '1400x800'))
        self.root.configure(bg=StyleManager.COLOR_BG)

        self.style_manager = StyleManager()
        self.style_manager.setup_default_styles()

        self.success_sound = self.reject_sound = None
        if config.get('inspection.sound_enabled', True):
            try:
                pygame.mixer.init()
                self.success_sound = pygame.mixer.Sound(resource_path('assets/success.wav'))
                self.reject_sound = pygame.mixer.Sound(resource_path('assets/reject.wav'))
            except (pygame.error, FileNotFoundError) as e:
                print(f"사운드 초기화 실패: {e}")
                self.success_sound = self.reject_sound = None

        self.application_path = os.path.dirname(sys.executable) if getattr(sys, 'frozen', False) else os.path.dirname(os.path.abspath(__file__))
        self._setup_paths()

        try:
            self.catalog = JsonDefectCatalog.from_file(
                resource_path(config.get('inspection.defects_file', 'assets/defects.json')),
                default_language=config.get('inspection.default_language', 'english'))
        except ConfigurationError as e:
            UIUtils.show_error_message("불량 목록 오류", str(e))
            self.root.destroy()
            raise

        try:
            self.computer_id = hex(uuid.getnode())
        except (ValueError, OSError):
            import socket
            self.computer_id = socket.gethostname()
        self.CURRENT_STATE_FILE = f"_current_inspection_state_{self.computer_id}.json"

        self.timer = SessionTimer()
        self.state_store = JsonStateStore(os.path.join(self.save_folder, self.CURRENT_STATE_FILE), timer=self.timer)
        self.logger: Optional[EventLogger] = None
        self.session: Optional[InspectionSession] = None
        self.details: Optional[InspectionDetails] = None

        self.status_message_job: Optional[str] = None
        self.timer_job: Optional[str] = None
        self.ticks_since_save = 0

        self._setup_core_ui_structure()
        self.show_details_screen()

        self.root.bind_all(f"<KeyPress-{config.get('inspection.pass_key', 'F11')}>", lambda e: self.on_pass())
        self.root.bind_all(f"<KeyPress-{config.get('inspection.reject_key', 'F12')}>", lambda e: self.on_reject())
        self.root.protocol("WM_DELETE_WINDOW", self.on_closing)

    def _setup_paths(self):
        self.save_folder = config.get('logging.data_folder') or os.path.join(self.application_path, 'data')
        self.reports_folder = os.path.join(self.save_folder, "reports")
        ensure_directory_exists(self.save_folder)
        ensure_directory_exists(self.reports_folder)

    def _setup_core_ui_structure(self):
        status_bar = tk.Frame(self.root, bg=StyleManager.COLOR_SIDEBAR_BG, bd=1, relief=tk.SUNKEN)
        status_bar.pack(side=tk.BOTTOM, fill=tk.X)
        self.status_label = tk.Label(status_bar, text="준비", anchor=tk.W, bg=StyleManager.COLOR_SIDEBAR_BG, fg=StyleManager.COLOR_TEXT)
        self.status_label.pack(side=tk.LEFT, padx=10, pady=4)
        self.main_frame = ttk.Frame(self.root)
        self.main_frame.pack(fill=tk.BOTH, expand=True, padx=10, pady=10)

    # #####################################################################
    # # 작업 정보 입력 화면
    # #####################################################################

    def show_details_screen(self):
        UIUtils.clear_widget_children(self.main_frame)
        center_frame = ttk.Frame(self.main_frame)
        center_frame.place(relx=0.5, rely=0.45, anchor="center")

        try:
            logo_img = Image.open(resource_path(os.path.join('assets', 'logo.png')))
            logo_img = logo_img.resize((300, int(300 * logo_img.height / logo_img.width)), Image.Resampling.LANCZOS)
            self.logo_photo_ref = ImageTk.PhotoImage(logo_img)
            ttk.Label(center_frame, image=self.logo_photo_ref).grid(row=0, column=0, columnspan=2, pady=(0, 20))
        except (OSError, ValueError) as e:
            print(f"로고 로드 실패: {e}")

        ttk.Label(center_frame, text=config.get('ui.window_title', '봉제 품질 검사'), style='Title.TLabel').grid(row=1, column=0, columnspan=2, pady=(0, 30))

        self.detail_entries: Dict[str, ttk.Entry] = {}
        fields = [
            ('inspector', "검사자"), ('style_no', "스타일 번호"), ('buyer', "바이어"),
            ('order_no', "오더 번호"), ('color', "색상"), ('order_quantity', "오더 수량"),
        ]
        for row, (key, label) in enumerate(fields, start=2):
            _, entry = UIUtils.create_labeled_entry(center_frame, label, width=30, row=row)
            self.detail_entries[key] = entry
        self.detail_entries['inspector'].focus()
        self.detail_entries['order_quantity'].bind('<Return>', self.start_inspection)

        ttk.Button(center_frame, text="검사 시작", command=self.start_inspection, width=20).grid(
            row=len(fields) + 2, column=0, columnspan=2, pady=30)

    def _read_details(self) -> Optional[InspectionDetails]:
        values = {key: entry.get().strip() for key, entry in self.detail_entries.items()}
        quantity = values.pop('order_quantity') or "0"
        if not quantity.isdigit():
            UIUtils.show_error_message("오류", "오더 수량은 0 이상의 숫자로 입력해주세요.")
            return None
        details = InspectionDetails(order_quantity=int(quantity), **values)
        if not details.is_complete():
            UIUtils.show_error_message("오류", "검사자와 스타일 번호를 입력해주세요.")
            return None
        return details

    def start_inspection(self, event=None):
        details = self._read_details()
        if not details:
            return

        saved_state = self.state_store.restore()
        if saved_state and saved_state.inspection_details:
            saved = saved_state.inspection_details
            msg = (f"· 스타일: {saved.style_no}\n· 검사자: {saved.inspector}\n"
                   f"· 검사 수량: {saved_state.checked_quantity}개")
            if UIUtils.ask_yes_no("이전 작업 복구", f"이전에 마치지 못한 검사 작업을 이어서 진행하시겠습니까?\n\n{msg}"):
                self._resume_session(saved_state)
                return
            self.state_store.delete()

        details.session_id = f"INSP-{datetime.datetime.now().strftime('%Y%m%d-%H%M%S')}"
        state = SessionState(
            language=config.get('inspection.default_language', self.catalog.default_language),
            view=config.get('inspection.default_view', 'list'),
            inspection_details=details,
        )
        self.timer.reset()
        self._open_session(state)
        self.logger.log_event('SESSION_START', detail={'session_id': details.session_id, 'style_no': details.style_no})
        self.state_store.save(self.session.serialize())
        self.show_inspection_screen()

    def _resume_session(self, state: SessionState):
        self.timer = SessionTimer(elapsed_seconds=self.state_store.restore_elapsed_seconds())
        self.state_store.timer = self.timer
        try:
            self._open_session(state)
        except InspectionError as e:
            UIUtils.show_warning_message("오류", f"이전 작업 상태 복구 실패: {e}")
            self.state_store.delete()
            return
        restored = self.logger.restore_entries()
        self.logger.log_event('SESSION_RESTORE', detail={'session_id': self.details.session_id, 'entries': len(restored)})
        self.show_inspection_screen()
        self.show_status_message("이전 검사 작업을 복구했습니다.", StyleManager.COLOR_PRIMARY)

    def _open_session(self, state: SessionState):
        self.details = state.inspection_details
        if self.logger:
            self.logger.stop_logger()
        self.logger = self._create_logger(self.details)
        try:
            self.session = InspectionSession.restore(state, self.catalog,
                                                     persistence=self.state_store, log_sink=self.logger)
        except InspectionError:
            self.logger.stop_logger()
            self.logger = None
            self.details = None
            self.session = None
            raise

    def _create_logger(self, details: InspectionDetails) -> EventLogger:
        # 복구된 세션도 시작한 날의 로그 파일에 이어서 기록
        match = re.match(r"INSP-(\d{8})-", details.session_id)
        log_date = match.group(1) if match else datetime.date.today().strftime('%Y%m%d')
        sanitized_name = re.sub(r'[\\/*?:"<>|]', "", details.inspector)
        audit_prefix = config.get('logging.audit_log_prefix', 'inspection_audit')
        event_prefix = config.get('logging.event_log_prefix', 'inspection_events')
        return EventLogger(
            event_log_path=os.path.join(self.save_folder, f"{event_prefix}_{sanitized_name}_{log_date}.csv"),
            audit_log_path=os.path.join(self.save_folder, f"{audit_prefix}_{sanitized_name}_{log_date}.csv"),
            worker_name=details.inspector,
            session_id=details.session_id,
        )

    # #####################################################################
    # # 검사 화면
    # #####################################################################

    def show_inspection_screen(self):
        UIUtils.clear_widget_children(self.main_frame)

        header = ttk.Frame(self.main_frame)
        header.pack(fill=tk.X)
        d = self.details
        ttk.Label(header, text=f"{d.style_no}  |  {d.buyer}  |  {d.order_no}  |  {d.color}  |  오더 {d.order_quantity}",
                  style='Header.TLabel').pack(side=tk.LEFT, padx=10)
        ttk.Label(header, text=f"검사자: {d.inspector}").pack(side=tk.RIGHT, padx=10)

        toolbar = ttk.Frame(self.main_frame)
        toolbar.pack(fill=tk.X, pady=(10, 5))
        self.view_toggle = ViewToggleComponent(toolbar, self.catalog.languages(), self.session.view, self.session.language)
        self.view_toggle.set_callback('view_changed', self.on_view_changed)
        self.view_toggle.set_callback('language_changed', self.on_language_changed)
        self.view_toggle.build()
        self.timer_control = TimerControlComponent(toolbar)
        self.timer_control.set_callback('toggle', self.on_play_pause)
        self.timer_control.build()
        ttk.Button(toolbar, text="제출", command=self.submit_session).pack(side=tk.RIGHT, padx=5)
        ttk.Button(toolbar, text="보고서 저장", command=self.export_report).pack(side=tk.RIGHT, padx=5)
        ttk.Button(toolbar, text="미리보기", command=self.show_preview_window).pack(side=tk.RIGHT, padx=5)

        body = ttk.Frame(self.main_frame)
        body.pack(fill=tk.BOTH, expand=True)
        body.grid_columnconfigure(1, weight=3)
        body.grid_columnconfigure(3, weight=2)
        body.grid_rowconfigure(0, weight=1)

        self.pass_button = ttk.Button(body, text="PASS", style='Pass.TButton', command=self.on_pass)
        self.pass_button.grid(row=0, column=0, sticky="nsew", padx=5)

        defect_frame = ttk.Frame(body)
        defect_frame.grid(row=0, column=1, sticky="nsew", padx=5)
        self.defect_list = DefectListComponent(defect_frame, max_count=config.get('inspection.max_defect_count', 99),
                                               grid_columns=config.get('ui.grid_columns', 4))
        self.defect_list.set_callback('defect_selected', self.on_defect_selected)
        self.defect_list.build()

        self.reject_button = ttk.Button(body, text="REJECT", style='Reject.TButton', command=self.on_reject)
        self.reject_button.grid(row=0, column=2, sticky="nsew", padx=5)

        log_frame = ttk.Frame(body)
        log_frame.grid(row=0, column=3, sticky="nsew", padx=5)
        self.log_display = LogDisplayComponent(log_frame)
        self.log_display.build()
        self.log_display.set_entries(self.logger.get_entries())

        self.summary_display = SummaryComponent(self.main_frame)
        self.summary_display.build()

        self._render_defect_list()
        self._refresh_display()
        self._start_timer_job()

    def _render_defect_list(self):
        self.defect_list.render(self.catalog.names(self.session.language), self.session.view,
                                self.session.defects, self.session.current_defect_count)

    def _refresh_display(self):
        if not self.session or not hasattr(self, 'summary_display'):
            return
        is_playing = self.timer.is_playing
        self.pass_button.state(['!disabled'] if self.session.can_pass(is_playing) else ['disabled'])
        self.reject_button.state(['!disabled'] if self.session.can_reject(is_playing) else ['disabled'])
        self.defect_list.refresh_counts(self.session.defects, self.session.current_defect_count)
        self.summary_display.update_summary(build_summary(self.session.serialize(), self.catalog))
        self.timer_control.update_display(format_elapsed(self.timer.elapsed_seconds), is_playing)

    # #####################################################################
    # # 판정 처리
    # #####################################################################

    def on_defect_selected(self, index: str, count: int):
        try:
            self.session.select_defect(index, count)
        except InspectionError as e:
            UIUtils.show_error_message("오류", str(e))
        self._refresh_display()

    def on_pass(self):
        if not self.session or self.session.is_submitted:
            return
        if not self.session.mark_pass(self.timer.is_playing):
            self.show_status_message("일시정지 상태이거나 선택된 불량이 있어 양품 판정을 할 수 없습니다.", StyleManager.COLOR_DEFECT)
            return
        if self.success_sound:
            self.success_sound.play()
        self._after_decision()

    def on_reject(self):
        if not self.session or self.session.is_submitted:
            return
        try:
            rejected = self.session.mark_reject(self.timer.is_playing, self.session.language)
        except UnknownDefectError as e:
            UIUtils.show_error_message("불량 목록 오류", str(e))
            return
        if not rejected:
            self.show_status_message("일시정지 상태이거나 선택된 불량이 없어 불량 판정을 할 수 없습니다.", StyleManager.COLOR_DEFECT)
            return
        if self.reject_sound:
            self.reject_sound.play()
        self._after_decision()

    def _after_decision(self):
        entry = self.logger.get_entries()[-1]
        self.log_display.add_entry(entry)
        self.show_status_message(f"#{entry.garment_no} {entry.status}",
                                 StyleManager.COLOR_SUCCESS if entry.type == LOG_TYPE_PASS else StyleManager.COLOR_DEFECT)
        self._refresh_display()

    def on_view_changed(self, view: str):
        self.session.set_view(view)
        self._render_defect_list()

    def on_language_changed(self, language: str):
        self.session.set_language(language)
        self._render_defect_list()
        self._refresh_display()

    # #####################################################################
    # # 타이머
    # #####################################################################

    def on_play_pause(self):
        is_playing = self.timer.toggle()
        self.logger.log_event('TIMER_PLAY' if is_playing else 'TIMER_PAUSE',
                              detail={'elapsed_seconds': self.timer.elapsed_seconds})
        self.state_store.save(self.session.serialize())
        self._refresh_display()

    def _start_timer_job(self):
        self._stop_timer_job()
        self.timer_job = self.root.after(1000, self._update_timer)

    def _stop_timer_job(self):
        if self.timer_job:
            self.root.after_cancel(self.timer_job)
            self.timer_job = None

    def _update_timer(self):
        if not self.root.winfo_exists() or not self.session:
            return
        if self.timer.is_playing:
            self.timer.tick()
            self.ticks_since_save += 1
            if self.ticks_since_save >= self.AUTOSAVE_INTERVAL_SEC:
                self.ticks_since_save = 0
                self.state_store.save(self.session.serialize())
            self.timer_control.update_display(format_elapsed(self.timer.elapsed_seconds), True)
        self.timer_job = self.root.after(1000, self._update_timer)

    # #####################################################################
    # # 미리보기 / 보고서 / 제출
    # #####################################################################

    def show_preview_window(self):
        summary = build_summary(self.session.serialize(), self.catalog)
        popup = tk.Toplevel(self.root)
        popup.title("검사 결과 미리보기")
        popup.geometry("600x650")
        popup.transient(self.root)

        d = self.details
        info = ttk.Frame(popup, padding=15)
        info.pack(fill=tk.X)
        for row, (label, value) in enumerate([
            ("검사자", d.inspector), ("스타일 번호", d.style_no), ("바이어", d.buyer),
            ("오더 번호", d.order_no), ("색상", d.color), ("오더 수량", d.order_quantity),
            ("경과 시간", format_elapsed(self.timer.elapsed_seconds)),
        ]):
            ttk.Label(info, text=label, style='Header.TLabel').grid(row=row, column=0, sticky="w", pady=2)
            ttk.Label(info, text=f": {value}").grid(row=row, column=1, sticky="w", padx=10)

        summary_frame = ttk.Frame(popup)
        summary_frame.pack(fill=tk.X)
        summary_view = SummaryComponent(summary_frame)
        summary_view.build()
        summary_view.update_summary(summary)

        tree = ttk.Treeview(popup, columns=("defect", "count"), show="headings")
        tree.heading("defect", text="불량 항목")
        tree.heading("count", text="수량")
        tree.column("count", width=80, anchor="center")
        for item in summary['defect_breakdown']:
            tree.insert("", tk.END, values=(item['name'], item['count']))
        tree.pack(fill=tk.BOTH, expand=True, padx=15, pady=10)
        ttk.Button(popup, text="닫기", command=popup.destroy).pack(pady=10)

    def export_report(self):
        state = self.session.serialize()
        summary = build_summary(state, self.catalog)
        renderer = ReportRenderer({
            'size': config.get('report.page_size'),
            'font_path': config.get('report.font_path'),
            'bold_font_path': config.get('report.bold_font_path'),
        })
        filename = get_safe_filename(f"{self.details.session_id}_{self.details.style_no}.pdf")
        file_path = os.path.join(get_daily_folder_path(self.reports_folder), filename)
        try:
            renderer.render(summary, self.details, self.logger.get_entries(), file_path,
                            elapsed=format_elapsed(self.timer.elapsed_seconds))
        except InspectionError as e:
            UIUtils.show_error_message("보고서 생성 오류", f"보고서 생성 중 오류가 발생했습니다: {e}")
            return
        self.logger.log_event('REPORT_EXPORTED', detail={'path': file_path})
        if sys.platform == "win32":
            os.startfile(file_path)
        self.show_status_message(f"보고서를 저장했습니다: {file_path}", StyleManager.COLOR_PRIMARY)

    def submit_session(self):
        if not UIUtils.ask_yes_no("제출 확인", "검사를 제출하고 종료하시겠습니까?"):
            return
        self.timer.pause()
        self._stop_timer_job()
        self.session.submit(self._handoff_final_state)
        self.session = None
        self.logger.stop_logger()
        self.logger = None
        self.timer.reset()
        self.show_details_screen()
        self.show_status_message("검사가 제출되었습니다.", StyleManager.COLOR_SUCCESS)

    def _handoff_final_state(self, final_state: SessionState):
        """제출된 최종 상태를 이벤트 로그에 남기고 임시 상태 파일을 지웁니다."""
        summary = build_summary(final_state, self.catalog)
        self.logger.log_event('SESSION_SUBMIT', detail={
            'session_id': self.details.session_id,
            'work_time_sec': self.timer.elapsed_seconds,
            'summary': summary,
            'final_state': final_state.to_dict(),
        })
        self.logger.flush()
        self.state_store.delete()

    # #####################################################################
    # # 공통
    # #####################################################################

    def show_status_message(self, message: str, color: Optional[str] = None, duration: int = 4000):
        if not self.root.winfo_exists(): return
        if self.status_message_job: self.root.after_cancel(self.status_message_job)
        self.status_label['text'], self.status_label['fg'] = message, color or StyleManager.COLOR_TEXT
        self.status_message_job = self.root.after(duration, self._reset_status_message)

    def _reset_status_message(self):
        if self.status_label.winfo_exists():
            self.status_label['text'], self.status_label['fg'] = "준비", StyleManager.COLOR_TEXT

    def on_closing(self):
        if not UIUtils.ask_ok_cancel("종료", "프로그램을 종료하시겠습니까?"):
            return
        self._stop_timer_job()
        if self.session and not self.session.is_submitted:
            self.timer.pause()
            if UIUtils.ask_yes_no("작업 저장", "진행 중인 검사를 저장하고 종료할까요?"):
                self.state_store.save(self.session.serialize())
            else:
                self.state_store.delete()
        if self.logger:
            self.logger.log_event('WORK_END')
            self.logger.flush()
            self.logger.stop_logger()
        self.state_store.flush()
        self.state_store.stop()
        pygame.quit()
        self.root.destroy()

    def run(self):
        self.root.mainloop()


if __name__ == "__main__":
    app = GarmentInspectionApp()
    app.run()
