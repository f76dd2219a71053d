"""검사 결과 요약 및 PDF 보고서 생성 모듈"""

import datetime
import json
import os
from typing import Any, Dict, List, Optional

import qrcode
from PIL import Image, ImageDraw, ImageFont

from core.interfaces import DefectCatalog
from core.models import InspectionDetails, LogEntry, SessionState
from utils.exceptions import FileHandlingError, UnknownDefectError


def build_summary(state: SessionState, catalog: DefectCatalog, language: Optional[str] = None) -> Dict[str, Any]:
    """세션 스냅샷에서 보고서/미리보기용 요약을 계산합니다."""
    language = language or state.language
    checked = state.checked_quantity
    total_defects = sum(state.defects.values())

    breakdown = []
    for position, (index, count) in enumerate(state.defects.items()):
        if count <= 0:
            continue
        try:
            name = catalog.lookup(language, index)
        except UnknownDefectError:
            name = f"#{index}"
        breakdown.append({'index': index, 'name': name, 'count': count, '_order': position})
    breakdown.sort(key=lambda item: (-item['count'], _numeric_order(item['index']), item['_order']))
    for item in breakdown:
        del item['_order']

    return {
        'checked_quantity': checked,
        'good_output': state.good_output,
        'defect_pieces': state.defect_pieces,
        'total_defects': total_defects,
        'defect_rate': round(state.defect_pieces / checked * 100, 1) if checked else 0.0,
        'dhu': round(total_defects / checked * 100, 1) if checked else 0.0,
        'defect_breakdown': breakdown,
    }


def _numeric_order(index: str):
    try:
        return int(index)
    except (TypeError, ValueError):
        return float('inf')


class ReportRenderer:
    """요약과 판정 기록을 A4 비율 이미지 페이지로 그려 PDF 로 저장합니다."""

    DEFAULT_CONFIG = {
        'size': (1240, 1754), 'bg_color': "white", 'text_color': "black", 'accent_color': "#C0392B",
        'padding': 60,
        'font_path': "C:/Windows/Fonts/malgun.ttf",
        'bold_font_path': "C:/Windows/Fonts/malgunbd.ttf",
        'font_sizes': {'title': 56, 'header': 28, 'body': 24, 'small': 20},
        'qr_code': {'size': 240, 'box_size': 10, 'border': 2},
        'layout': {'line_height': 38, 'section_gap': 30, 'label_x': 60, 'value_x': 300},
    }

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = dict(self.DEFAULT_CONFIG)
        if config:
            self.config.update({k: v for k, v in config.items() if v is not None})
        self.config['size'] = tuple(self.config['size'])
        self.fonts = self._load_fonts()

    def _load_fonts(self) -> Dict[str, Any]:
        fonts = {}
        sizes = self.config['font_sizes']
        for name, size in sizes.items():
            path = self.config['bold_font_path'] if name in ('title', 'header') else self.config['font_path']
            try:
                fonts[name] = ImageFont.truetype(path, size)
            except IOError:
                fonts[name] = ImageFont.load_default()
        return fonts

    def _make_qr(self, summary: Dict[str, Any], details: Optional[InspectionDetails]) -> Image.Image:
        qr_conf = self.config['qr_code']
        qr_data = json.dumps({
            'session': details.session_id if details else "",
            'style': details.style_no if details else "",
            'checked': summary['checked_quantity'],
            'good': summary['good_output'],
            'defect': summary['defect_pieces'],
        })
        qr = qrcode.QRCode(version=1, error_correction=qrcode.constants.ERROR_CORRECT_L,
                           box_size=qr_conf['box_size'], border=qr_conf['border'])
        qr.add_data(qr_data)
        qr.make(fit=True)
        qr_img = qr.make_image(fill_color=self.config['text_color'], back_color=self.config['bg_color'])
        return qr_img.convert('RGB').resize((qr_conf['size'], qr_conf['size']))

    def _new_page(self):
        img = Image.new('RGB', self.config['size'], self.config['bg_color'])
        return img, ImageDraw.Draw(img)

    @staticmethod
    def _wrap_text(draw, text: str, font, max_width: float) -> List[str]:
        """글자 폭 기준으로 줄을 나눕니다. 한 단어가 폭보다 길면 글자 단위로 자릅니다."""
        lines = []
        current = ""
        for word in text.split(" "):
            candidate = f"{current} {word}" if current else word
            if draw.textlength(candidate, font=font) <= max_width:
                current = candidate
                continue
            if current:
                lines.append(current)
            current = ""
            for char in word:
                if current and draw.textlength(current + char, font=font) > max_width:
                    lines.append(current)
                    current = ""
                current += char
        if current or not lines:
            lines.append(current)
        return lines

    def _draw_rule(self, draw, y, width=2):
        W = self.config['size'][0]
        pad = self.config['padding']
        draw.line([(pad, y), (W - pad, y)], fill=self.config['text_color'], width=width)

    def render(self, summary: Dict[str, Any], details: Optional[InspectionDetails],
               entries: List[LogEntry], file_path: str, elapsed: str = "") -> str:
        W, H = self.config['size']
        pad = self.config['padding']
        layout = self.config['layout']
        fonts = self.fonts
        color = self.config['text_color']

        pages = []
        img, draw = self._new_page()

        title_text = "Inspection Report"
        title_w = draw.textlength(title_text, font=fonts['title'])
        draw.text(((W - title_w) / 2, pad), title_text, font=fonts['title'], fill=color)
        y = pad + 90
        self._draw_rule(draw, y, width=3)
        y += layout['section_gap']

        info_top = y
        info_items = []
        if details:
            info_items = [
                ("Inspector", details.inspector), ("Style No", details.style_no),
                ("Buyer", details.buyer), ("Order No", details.order_no),
                ("Color", details.color), ("Order Qty", str(details.order_quantity)),
            ]
        if elapsed:
            info_items.append(("Elapsed", elapsed))
        for label, value in info_items:
            draw.text((layout['label_x'], y), label, font=fonts['header'], fill=color)
            draw.text((layout['value_x'], y), f": {value}", font=fonts['body'], fill=color)
            y += layout['line_height']
        img.paste(self._make_qr(summary, details), (W - self.config['qr_code']['size'] - pad, info_top))
        y = max(y, info_top + self.config['qr_code']['size']) + layout['section_gap']

        self._draw_rule(draw, y)
        y += layout['section_gap']
        summary_items = [
            ("Checked", summary['checked_quantity']), ("Good", summary['good_output']),
            ("Defect Pieces", summary['defect_pieces']), ("Total Defects", summary['total_defects']),
            ("Defect Rate", f"{summary['defect_rate']}%"), ("DHU", summary['dhu']),
        ]
        for label, value in summary_items:
            draw.text((layout['label_x'], y), label, font=fonts['header'], fill=color)
            draw.text((layout['value_x'], y), f": {value}", font=fonts['body'], fill=color)
            y += layout['line_height']

        y += layout['section_gap']
        draw.text((layout['label_x'], y), "Defect Breakdown", font=fonts['header'], fill=self.config['accent_color'])
        y += layout['line_height']
        if not summary['defect_breakdown']:
            draw.text((layout['label_x'], y), "-", font=fonts['body'], fill=color)
            y += layout['line_height']
        for item in summary['defect_breakdown']:
            draw.text((layout['label_x'], y), item['name'], font=fonts['body'], fill=color)
            draw.text((W - pad - 120, y), str(item['count']), font=fonts['body'], fill=color)
            y += layout['line_height']
            if y > H - pad - layout['line_height']:
                pages.append(img)
                img, draw = self._new_page()
                y = pad

        # 판정 기록 표
        y += layout['section_gap']
        bottom = H - pad - 2 * layout['line_height']
        max_width = W - pad - layout['label_x']
        header_needed = True
        for entry in entries:
            when = datetime.datetime.fromtimestamp(entry.timestamp / 1000).strftime('%H:%M:%S')
            defects = ", ".join(f"{d.name} x{d.count}" for d in entry.defect_details)
            line = f"#{entry.garment_no:<5} {when}  {entry.status:<7} {defects}".rstrip()
            for text in self._wrap_text(draw, line, fonts['small'], max_width):
                if y > bottom:
                    pages.append(img)
                    img, draw = self._new_page()
                    y = pad
                    header_needed = True
                if header_needed:
                    draw.text((layout['label_x'], y), "Inspection Log", font=fonts['header'], fill=self.config['accent_color'])
                    y += layout['line_height']
                    self._draw_rule(draw, y, width=1)
                    y += 10
                    header_needed = False
                draw.text((layout['label_x'], y), text, font=fonts['small'], fill=color)
                y += layout['line_height'] - 8

        footer = f"Generated: {datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"
        pages.append(img)
        for page_no, page in enumerate(pages, start=1):
            page_draw = ImageDraw.Draw(page)
            page_draw.text((pad, H - pad), f"{footer}   |   {page_no} / {len(pages)}", font=fonts['small'], fill=color)

        try:
            directory = os.path.dirname(file_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            pages[0].save(file_path, "PDF", resolution=150.0, save_all=True, append_images=pages[1:])
        except OSError as e:
            raise FileHandlingError(f"보고서 저장 실패: {e}") from e
        return file_path
