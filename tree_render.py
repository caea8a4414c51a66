"""
╔══════════════════════════════════════════════════════════════════╗
║        Balanced Tree Visualizer v1.0  -  RENDER & EXPORT         ║
║                                                                  ║
║  Consumers of the engines' public surface:                       ║
║    get_all_nodes() / get_edges() / calculate_coordinates()       ║
║    operations[i].description / .highlight                        ║
║                                                                  ║
║  ┌──────────────┐  replay(step)  ┌───────────────────┐           ║
║  │ operation log│ ─────────────► │ TreeImageRenderer │ ─► Image  ║
║  └──────────────┘                └─────────┬─────────┘           ║
║                                            ├── PDFExporter       ║
║                                            └── VideoExporter     ║
║                                                                  ║
║  Dependencies                                                    ║
║  ────────────                                                    ║
║  Pillow                → image rendering                         ║
║  reportlab             → PDF walkthrough                         ║
║  opencv-python + numpy → MP4 video export                        ║
║  imageio               → fallback MP4 export                     ║
╚══════════════════════════════════════════════════════════════════╝
"""

import logging
import os
import shutil
import tempfile
from datetime import datetime

# ─── Pillow: image rendering for PNG / PDF / video frames ───────
try:
    from PIL import Image, ImageDraw, ImageFont
    HAS_PIL = True
except ImportError:
    HAS_PIL = False

# ─── OpenCV + NumPy: primary MP4 video export engine ────────────
try:
    import cv2
    import numpy as np
    HAS_CV2 = True
except ImportError:
    HAS_CV2 = False

# ─── imageio: fallback video export if OpenCV unavailable ────────
try:
    import imageio
    import numpy as np
    HAS_IMAGEIO = True
except ImportError:
    HAS_IMAGEIO = False

# ─── ReportLab: PDF generation for full step walkthrough ────────
try:
    from reportlab.lib.pagesizes import A4, landscape
    from reportlab.pdfgen import canvas as pdf_canvas
    HAS_REPORTLAB = True
except ImportError:
    HAS_REPORTLAB = False

from rb_tree import RED
from tree_checks import tree_stats
from tree_layout import node_width
from tree_steps import replay, count_kinds, EMPTY_STEP_DESCRIPTION

logger = logging.getLogger(__name__)

ENGINE_TITLES = {
    "avl":   "AVL Tree",
    "rb":    "Red-Black Tree",
    "btree": "B-Tree",
}


def step_frames(factory, operations, settings):
    """
    Yield (step, tree, record) for steps 1..N.

    The tree at each step is rebuilt by replay and laid out with the
    settings' layout config for its engine.
    """
    for i, op in enumerate(operations, start=1):
        tree = replay(factory, operations, i)
        tree.calculate_coordinates(settings.layout_config(tree.ENGINE))
        yield i, tree, op


# ═════════════════════════════════════════════════════════════════
#  TREE IMAGE RENDERER
# ═════════════════════════════════════════════════════════════════
class TreeImageRenderer:
    """
    Off-screen tree renderer using Pillow.

    Node coordinates from the layout are fitted into the image (uniform
    scale, never enlarged), then edges are drawn first and nodes on
    top: circles for AVL / Red-Black nodes, key boxes for B-Tree nodes.

    Args:
        settings (Settings): Colour lookups.
        width    (int)     : Image width in pixels.
        height   (int)     : Image height in pixels.
    """

    def __init__(self, settings, width=800, height=500):
        self.settings    = settings
        self.width       = width
        self.height      = height
        self.node_radius = 22
        self.padding     = 50

    @staticmethod
    def _load_fonts():
        """
        Monospace fonts for labels: (normal_14pt, small_11pt, title_16pt).

        Falls back to Pillow's built-in bitmap font if none is found.
        """
        candidates = [
            "consola.ttf",                                         # Windows
            "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf", # Debian/Ubuntu
            "/usr/share/fonts/TTF/DejaVuSansMono.ttf",             # Arch
            "/System/Library/Fonts/Menlo.ttc",                     # macOS
        ]
        for p in candidates:
            try:
                return (ImageFont.truetype(p, 14), ImageFont.truetype(p, 11),
                        ImageFont.truetype(p, 16))
            except OSError:
                continue
        font = ImageFont.load_default()
        return font, font, font

    def _fit(self, nodes, top, bottom):
        """Return a (x, y) → pixel mapping fitting ``nodes`` in the image."""
        xs = [n.x for n in nodes]
        ys = [n.y for n in nodes]
        span_x = max(max(xs) - min(xs), 1)
        span_y = max(max(ys) - min(ys), 1)
        avail_x = self.width - 2 * self.padding
        avail_y = max(bottom - top, 1)
        scale = min(1.0, avail_x / span_x, avail_y / span_y)
        mid_x = (max(xs) + min(xs)) / 2
        min_y = min(ys)

        def to_px(x, y):
            return (int(self.width / 2 + (x - mid_x) * scale),
                    int(top + (y - min_y) * scale))
        return to_px, scale

    def render(self, tree, highlight=None, title="", case_text=""):
        """
        Render a laid-out tree to a Pillow Image.

        Args:
            tree      (engine)    : Engine after calculate_coordinates().
            highlight (list|None) : Keys to ring.
            title     (str)       : Text drawn at the top.
            case_text (str)       : Step description drawn at the bottom.

        Returns:
            Image|None: Rendered image, or None if Pillow is unavailable.
        """
        if not HAS_PIL:
            return None

        s = self.settings
        highlight = set(h for h in (highlight or []) if h is not None)

        img  = Image.new("RGB", (self.width, self.height), s.get("CANVAS_BG"))
        draw = ImageDraw.Draw(img)
        font, font_s, font_t = self._load_fonts()

        if title:
            draw.text((10, 8), title, fill=s.get("ACCENT"), font=font_t)

        if case_text:
            y0 = self.height - 80
            draw.rectangle([5, y0, self.width - 5, self.height - 5],
                           fill=s.get("CASE_BG"))
            for i, ln in enumerate(case_text.split('\n')[:3]):
                draw.text((10, y0 + 5 + i * 16), ln[:90],
                          fill=s.get("FG"), font=font_s)

        nodes = tree.get_all_nodes()
        if not nodes:
            draw.text((self.width // 2 - 40, self.height // 2),
                      "Empty Tree", fill=s.get("FG"), font=font)
            return img

        bottom = self.height - (120 if case_text else 60)
        to_px, scale = self._fit(nodes, 55, bottom)

        for edge in tree.get_edges():
            src, dst = edge["source"], edge["target"]
            draw.line([to_px(src.x, src.y), to_px(dst.x, dst.y)],
                      fill=s.get("EDGE"), width=2)

        if tree.ENGINE == "btree":
            config = s.layout_config("btree")
            for node in nodes:
                self._draw_box(draw, node, to_px, scale, config, highlight,
                               font_s)
        else:
            for node in nodes:
                self._draw_circle(draw, node, to_px, tree.ENGINE, highlight,
                                  font)

        draw.text((10, self.height - 18), "Tree Visualizer v1.0",
                  fill=s.get("WATERMARK"), font=font_s)
        return img

    def _draw_circle(self, draw, node, to_px, engine, highlight, font):
        s = self.settings
        x, y = to_px(node.x, node.y)
        r = self.node_radius
        if engine == "rb":
            fill = (s.get("NODE_RED_FILL") if node.color == RED
                    else s.get("NODE_BLACK_FILL"))
        else:
            fill = s.get("NODE_AVL_FILL")
        hot     = node.key in highlight
        outline = s.get("HIGHLIGHT") if hot else "white"
        draw.ellipse([x - r, y - r, x + r, y + r],
                     fill=fill, outline=outline, width=3 if hot else 1)
        self._centered_text(draw, x, y, str(node.key), s.get("NODE_TEXT"),
                            font)

    def _draw_box(self, draw, node, to_px, scale, config, highlight, font):
        s = self.settings
        x, y = to_px(node.x, node.y)
        half_w = max(node_width(len(node.keys), config) * scale, 24) / 2
        half_h = 14
        hot     = any(k in highlight for k in node.keys)
        outline = s.get("HIGHLIGHT") if hot else "white"
        draw.rectangle([x - half_w, y - half_h, x + half_w, y + half_h],
                       fill=s.get("NODE_BOX_FILL"), outline=outline,
                       width=3 if hot else 1)
        label = " ".join(str(k) for k in node.keys)
        self._centered_text(draw, x, y, label, s.get("NODE_BOX_TEXT"), font)

    @staticmethod
    def _centered_text(draw, x, y, text, fill, font):
        bb = draw.textbbox((0, 0), text, font=font)
        tw, th = bb[2] - bb[0], bb[3] - bb[1]
        draw.text((x - tw // 2, y - th // 2), text, fill=fill, font=font)

    def render_step(self, tree, op, step, total):
        """Render one replayed step with its record as caption."""
        title = f"{ENGINE_TITLES.get(tree.ENGINE, '')}  step {step}/{total}"
        return self.render(tree, op.highlight, title, op.description)

    def render_png(self, tree, filename, title=""):
        """
        Save a single frame as PNG.

        Returns:
            bool: True on success, False on error.
        """
        if not HAS_PIL:
            logger.error("Pillow required for PNG export (pip install Pillow)")
            return False
        try:
            img = self.render(tree, title=title or
                              ENGINE_TITLES.get(tree.ENGINE, ""))
            img.save(filename)
            return True
        except (OSError, ValueError):
            logger.exception("PNG export to %s failed", filename)
            return False


# ═════════════════════════════════════════════════════════════════
#  PDF EXPORTER
#
#  Title page, one page per recorded step (tree at that step by
#  replay), summary page with per-kind counts.
#
#  Requires: reportlab + Pillow
# ═════════════════════════════════════════════════════════════════
class PDFExporter:
    """
    Export the full operation log as a landscape-A4 PDF document.

    Attributes:
        settings (Settings)          : Colour / layout lookups.
        renderer (TreeImageRenderer) : Renders each step to an image.
    """

    def __init__(self, settings):
        self.settings = settings
        self.renderer = TreeImageRenderer(settings, 700, 400)

    def export(self, factory, operations, filename):
        """
        Generate a PDF walkthrough.

        Args:
            factory    (callable): Builds a fresh engine for replay.
            operations (list)    : Operation log to walk through.
            filename   (str)     : Output PDF path.

        Returns:
            bool: True on success, False on error.
        """
        if not HAS_REPORTLAB:
            logger.error("ReportLab required for PDF export "
                         "(pip install reportlab)")
            return False
        if not HAS_PIL:
            logger.error("Pillow required for PDF export (pip install Pillow)")
            return False

        total = len(operations)
        tmp = tempfile.mkdtemp()
        try:
            pw, ph = landscape(A4)
            c = pdf_canvas.Canvas(filename, pagesize=landscape(A4))
            engine = factory().ENGINE

            # ── Title page ──
            c.setFont("Helvetica-Bold", 28)
            c.drawCentredString(pw / 2, ph - 100,
                                f"{ENGINE_TITLES.get(engine, '')} Construction")
            c.setFont("Helvetica", 16)
            c.drawCentredString(pw / 2, ph - 140, "Step-by-Step Walkthrough")
            c.setFont("Helvetica", 12)
            c.drawCentredString(pw / 2, ph - 180,
                f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}")
            c.drawCentredString(pw / 2, ph - 200, f"Total Steps: {total}")
            if not operations:
                c.drawCentredString(pw / 2, ph - 230, EMPTY_STEP_DESCRIPTION)
            c.showPage()

            # ── One page per step ──
            final = None
            for i, tree, op in step_frames(factory, operations, self.settings):
                final = tree
                img = self.renderer.render_step(tree, op, i, total)
                ip = os.path.join(tmp, f"s{i:04d}.png")
                img.save(ip)

                c.setFont("Helvetica-Bold", 14)
                c.drawString(30, ph - 30, f"Step {i} of {total}")
                c.drawImage(ip, 30, ph - 450, width=700, height=400,
                            preserveAspectRatio=True)
                c.setFont("Helvetica", 12)
                c.drawString(30, ph - 480, f"Action: {op.description}")
                c.setFont("Helvetica-Bold", 11)
                c.drawString(30, ph - 500, f"Kind: {op.kind}"
                             + (f"   Case: {op.case}" if op.case else ""))
                c.showPage()

            # ── Summary page ──
            c.setFont("Helvetica-Bold", 20)
            c.drawCentredString(pw / 2, ph - 100, "Summary")
            c.setFont("Helvetica", 12)
            y = ph - 150
            lines = [f"Total Steps: {total}"]
            if final is not None:
                stats = tree_stats(final)
                lines += [f"Keys: {stats['keys']}",
                          f"Height: {stats['height']}",
                          f"Rotations: {stats['rotations']}",
                          f"Recolorings: {stats['recolors']}",
                          f"Splits: {stats['splits']}"]
            for kind, n in sorted(count_kinds(operations).items()):
                lines.append(f"  {kind}: {n}")
            for line in lines:
                c.drawString(100, y, line)
                y -= 22
            c.showPage()
            c.save()
            return True
        except Exception:
            logger.exception("PDF export to %s failed", filename)
            return False
        finally:
            shutil.rmtree(tmp, ignore_errors=True)


# ═════════════════════════════════════════════════════════════════
#  VIDEO EXPORTER
#
#  Each step is rendered to a 1280×720 frame and held for ``fps``
#  frames (one second per step).  OpenCV first, imageio fallback.
# ═════════════════════════════════════════════════════════════════
class VideoExporter:
    """
    Export the operation log as an MP4 video.

    Attributes:
        settings (Settings)          : Colour / layout lookups.
        renderer (TreeImageRenderer) : Renders frames at 1280×720.
    """

    def __init__(self, settings):
        self.settings = settings
        self.renderer = TreeImageRenderer(settings, 1280, 720)

    def _frames(self, factory, operations):
        total = len(operations)
        for i, tree, op in step_frames(factory, operations, self.settings):
            yield np.array(self.renderer.render_step(tree, op, i, total))

    def export(self, factory, operations, filename, fps=None):
        """
        Export using the first available backend.

        Returns:
            bool: True on success, False on error / empty log / no backend.
        """
        if not operations:
            logger.error("Nothing to export: operation log is empty")
            return False
        fps = fps or self.settings.fps
        if HAS_CV2:
            return self.export_cv2(factory, operations, filename, fps)
        return self.export_imageio(factory, operations, filename, fps)

    def export_cv2(self, factory, operations, filename, fps=2):
        """
        Export video using OpenCV's VideoWriter (mp4v codec).

        Returns:
            bool: True on success, False on error.
        """
        if not HAS_CV2 or not HAS_PIL:
            logger.error("opencv-python + Pillow required for video export")
            return False
        try:
            fourcc = cv2.VideoWriter_fourcc(*'mp4v')
            out    = cv2.VideoWriter(filename, fourcc, fps, (1280, 720))
            try:
                for frame in self._frames(factory, operations):
                    bgr = cv2.cvtColor(frame, cv2.COLOR_RGB2BGR)
                    for _ in range(max(1, fps)):
                        out.write(bgr)
            finally:
                out.release()
            return True
        except Exception:
            logger.exception("Video export to %s failed", filename)
            return False

    def export_imageio(self, factory, operations, filename, fps=2):
        """
        Export video using imageio (fallback if OpenCV unavailable).

        Returns:
            bool: True on success, False on error.
        """
        if not HAS_IMAGEIO or not HAS_PIL:
            logger.error("imageio + Pillow required for video export")
            return False
        try:
            frames = list(self._frames(factory, operations))
            imageio.mimwrite(filename, frames, fps=fps)
            return True
        except Exception:
            logger.exception("Video export to %s failed", filename)
            return False
