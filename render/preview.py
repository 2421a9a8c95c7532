import cv2
import numpy as np
from typing import Optional, Tuple

from padel.design_tokens import get_color
from padel.layout_engine import Rect, ResolvedLayout
from padel.screen import ScreenMetrics
from padel.timeline import ScoreView


def to_bgr(color: int) -> Tuple[int, int, int]:
    """0xRRGGBB -> OpenCV (b, g, r)."""
    return color & 0xFF, (color >> 8) & 0xFF, (color >> 16) & 0xFF


class LayoutPreviewRenderer:

    def __init__(
        self,
        layout: ResolvedLayout,
        metrics: ScreenMetrics,
        score_view: Optional[ScoreView] = None,
        show_labels: bool = True,
    ):
        self.layout = layout
        self.metrics = metrics
        self.score_view = score_view
        self.show_labels = show_labels

        if metrics.width <= 0 or metrics.height <= 0:
            raise ValueError("Screen metrics must be positive")

    def render(self) -> np.ndarray:

        width = int(self.metrics.width)
        height = int(self.metrics.height)

        canvas = np.zeros((height, width, 3), dtype=np.uint8)
        canvas[:] = to_bgr(get_color("colors.background"))

        for name, rect in self.layout.sections.items():
            self._draw_section(canvas, name, rect)

        for name, rect in self.layout.elements.items():
            self._draw_element(canvas, name, rect)

        if self.score_view is not None:
            self._draw_scores(canvas)

        if self.metrics.is_round:
            self._mask_bezel(canvas)

        return canvas

    def save(self, output_path: str) -> str:
        image = self.render()

        if not cv2.imwrite(output_path, image):
            raise RuntimeError(f"Cannot write preview image: {output_path}")

        return output_path

    # ----------------------------------------------------
    # DRAWING
    # ----------------------------------------------------

    def _draw_section(self, canvas, name: str, rect: Rect):

        x1, y1, x2, y2 = self._corners(rect)

        # translucent fill
        overlay = canvas.copy()
        cv2.rectangle(overlay, (x1, y1), (x2, y2), to_bgr(get_color("colors.cardBackground")), -1)
        alpha = 0.6
        cv2.addWeighted(overlay, alpha, canvas, 1 - alpha, 0, canvas)

        cv2.rectangle(canvas, (x1, y1), (x2, y2), to_bgr(get_color("colors.divider")), 1)

        if self.show_labels:
            self._put_label(canvas, name, (x1 + 4, y1 + 14), get_color("colors.mutedText"))

    def _draw_element(self, canvas, name: str, rect: Rect):

        x1, y1, x2, y2 = self._corners(rect)

        cv2.rectangle(canvas, (x1, y1), (x2, y2), to_bgr(get_color("colors.accent")), 1)

        if self.show_labels and rect.w >= 40 and rect.h >= 12:
            self._put_label(canvas, name, (x1 + 2, y1 + 11), get_color("colors.text"))

    def _draw_scores(self, canvas):

        view = self.score_view

        for element_name, team in (("teamAScore", view.team_a), ("teamBScore", view.team_b)):
            rect = self.layout.elements.get(element_name)
            if rect is None or rect.w <= 0 or rect.h <= 0:
                continue

            font = cv2.FONT_HERSHEY_SIMPLEX
            scale = max(0.4, rect.h / 60)
            (text_w, text_h), _ = cv2.getTextSize(team.points, font, scale, 2)

            origin = (
                int(rect.x + (rect.w - text_w) / 2),
                int(rect.y + (rect.h + text_h) / 2),
            )
            cv2.putText(canvas, team.points, origin, font, scale, to_bgr(get_color("colors.text")), 2)

        if view.is_finished and view.winner:
            self._put_label(canvas, f"Winner: {view.winner}", (8, int(self.metrics.height) - 8), get_color("colors.accent"))

    def _mask_bezel(self, canvas):

        height, width = canvas.shape[:2]

        mask = np.zeros((height, width), dtype=np.uint8)
        cv2.circle(mask, (width // 2, height // 2), min(width, height) // 2, 255, -1)

        canvas[mask == 0] = (40, 40, 40)

    # ----------------------------------------------------
    # HELPERS
    # ----------------------------------------------------

    @staticmethod
    def _corners(rect: Rect) -> Tuple[int, int, int, int]:
        x1 = int(round(rect.left))
        y1 = int(round(rect.top))
        x2 = int(round(rect.right)) - 1
        y2 = int(round(rect.bottom)) - 1
        return x1, y1, max(x1, x2), max(y1, y2)

    @staticmethod
    def _put_label(canvas, text: str, origin: Tuple[int, int], color: int):
        cv2.putText(canvas, text, origin, cv2.FONT_HERSHEY_SIMPLEX, 0.35, to_bgr(color), 1)
