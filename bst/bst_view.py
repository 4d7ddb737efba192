import math
from typing import Dict, List, Optional, Set

from PyQt5.QtCore import QEvent, QPointF, QRectF, Qt, QTimer, pyqtSignal
from PyQt5.QtGui import QColor, QBrush, QPen, QPainterPath
from PyQt5.QtWidgets import (
    QGraphicsItem,
    QGraphicsObject,
    QGraphicsPathItem,
    QMenu,
)

from bst.bst_layout import compute_layout, level_order
from core.base_view import BaseStructureView


PATH_COLOR = "#4fc3f7"
FOUND_COLOR = "#ff5252"
DELETE_COLOR = "#ff7043"
HIGHLIGHT_MS = 2000


class BSTView(BaseStructureView):
    deleteRequested = pyqtSignal(int)
    findRequested = pyqtSignal(int)
    clearRequested = pyqtSignal()

    def __init__(self, global_ctrl):
        super().__init__(global_ctrl)
        self.scene.installEventFilter(self)

        self.node_items: Dict[int, BSTNodeItem] = {}
        self.edge_items: Dict[tuple, BSTEdgeItem] = {}

        self._highlighted: Optional[BSTNodeItem] = None
        self._highlight_timer = QTimer(self)
        self._highlight_timer.setSingleShot(True)
        self._highlight_timer.timeout.connect(self._clear_highlight)

    # ---------- Public API ----------

    def reset(self):
        self.stop_all_animations()
        self.cancel_highlight()
        self.scene.clear()
        self.node_items.clear()
        self.edge_items.clear()

    def show_snapshot(self, snapshot):
        """Redraw without animation."""
        self._finalize_snapshot(snapshot, self._compute_layout(snapshot))

    def animate_build(self, snapshot):
        self.reset()
        if not snapshot["nodes"]:
            return

        positions = self._compute_layout(snapshot)
        sequential = self.anim.sequential()

        for node_id in level_order(snapshot):
            info = self._node_info(snapshot, node_id)
            node_item = self._create_node_item(info["id"], info["value"])
            target = positions[node_id]
            node_item.setPos(QPointF(target.x(), target.y() - 160))
            node_item.setOpacity(0.0)

            drop = self.anim.move_item(node_item, target, duration=560)
            fade = self.anim.fade_item(node_item, 0.0, 1.0, duration=560)
            sequential.addAnimation(self.anim.parallel(drop, fade))

        sequential.addAnimation(self.anim.pause(140))
        self._track_animation(
            sequential,
            finalizer=lambda: self._finalize_snapshot(snapshot, positions),
        )

    def animate_insert(self, snapshot, inserted_id, path_ids):
        """
        ``path_ids`` are the existing nodes visited while descending to the
        new leaf, root first.
        """
        self.cancel_highlight()
        positions = self._compute_layout(snapshot)
        if inserted_id is None or inserted_id not in positions:
            self._finalize_snapshot(snapshot, positions)
            return

        info = self._node_info(snapshot, inserted_id)
        target = positions[inserted_id]
        node_item = self._create_node_item(inserted_id, info["value"])
        path = [node_id for node_id in path_ids or [] if node_id in self.node_items]

        if not path:
            node_item.setPos(QPointF(target.x(), target.y() - 160))
            node_item.setOpacity(0.0)
            drop = self.anim.move_item(node_item, target, duration=840)
            fade = self.anim.fade_item(node_item, 0.0, 1.0, duration=840)
            self._track_animation(
                self.anim.parallel(drop, fade),
                finalizer=lambda: self._finalize_snapshot(snapshot, positions),
            )
            return

        root_item = self.node_items[path[0]]
        node_item.setPos(self._stage_position(root_item))
        node_item.setOpacity(0.0)

        temp_highlights: List["EdgeFlashItem"] = []
        sequence = self.anim.sequential()
        sequence.addAnimation(self.anim.fade_item(node_item, 0.0, 1.0, duration=300))

        for parent_id, child_id in zip(path, path[1:]):
            flash = self._edge_flash_animation(
                self.node_items[parent_id], self.node_items[child_id], None, temp_highlights
            )
            if flash:
                sequence.addAnimation(flash)
            sequence.addAnimation(
                self.anim.move_item(
                    node_item, self._stage_position(self.node_items[child_id]), duration=630
                )
            )

        final_flash = self._edge_flash_animation(
            self.node_items[path[-1]],
            None,
            self._center_from_position(target),
            temp_highlights,
        )
        if final_flash:
            sequence.addAnimation(final_flash)
        sequence.addAnimation(self.anim.move_item(node_item, target, duration=780))

        relayout = self._animate_relayout(positions, skip_ids={inserted_id})
        if relayout:
            sequence.addAnimation(relayout)

        self._track_animation(
            sequence,
            finalizer=lambda: self._finalize_insert_animation(snapshot, positions, temp_highlights),
        )

    def animate_delete(self, snapshot, target_id, path_ids):
        """
        ``target_id`` holds the deleted key. With two children that node
        survives and takes its successor's key; the successor node is the one
        that disappears.
        """
        self.cancel_highlight()
        previous_ids = set(self.node_items)
        current_ids = {node["id"] for node in snapshot["nodes"]}
        removed_ids = previous_ids - current_ids

        target = self.node_items.get(target_id)
        if target is None or not removed_ids:
            self._finalize_snapshot(snapshot, self._compute_layout(snapshot))
            return

        new_positions = self._compute_layout(snapshot)
        restore_colors: List[tuple] = []
        traversal_ids = [node_id for node_id in path_ids or [] if node_id != target_id]
        traversal = self._build_path_flash(traversal_ids, restore_colors)

        restore_colors.append((target, QColor(target.fillColor)))
        flash = self.anim.flash_brush(
            setter=target.setFillColor,
            start_color=target.fillColor,
            end_color=QColor(DELETE_COLOR),
            duration=360,
            loops=2,
        )

        vanish = []
        for removed_id in removed_ids:
            item = self.node_items[removed_id]
            vanish.append(self.anim.move_item(item, item.pos() + QPointF(0, -150), duration=420))
            vanish.append(self.anim.fade_item(item, 1.0, 0.0, duration=420))
        relayout = self._animate_relayout(new_positions, skip_ids=removed_ids)

        sequence = self.anim.sequential()
        if traversal:
            sequence.addAnimation(traversal)
        sequence.addAnimation(flash)
        sequence.addAnimation(self.anim.parallel(*vanish))
        if relayout:
            sequence.addAnimation(relayout)

        self._track_animation(
            sequence,
            finalizer=lambda: self._finalize_delete(snapshot, new_positions, restore_colors),
        )

    def animate_find(self, snapshot, found_id, path_ids):
        self.cancel_highlight()
        positions = self._compute_layout(snapshot)
        sequence = self.anim.sequential()
        duration_scale = 1.0 / 0.8

        restore_colors: List[tuple] = []
        traversal_ids = [node_id for node_id in path_ids or [] if node_id != found_id]
        traversal = self._build_path_flash(traversal_ids, restore_colors, duration_scale)
        if traversal:
            sequence.addAnimation(traversal)

        found_item = self.node_items.get(found_id) if found_id is not None else None
        if found_item is not None:
            flash = self.anim.flash_brush(
                setter=found_item.setFillColor,
                start_color=QColor(found_item.fillColor),
                end_color=QColor(FOUND_COLOR),
                duration=int(420 * duration_scale),
                loops=2,
            )
            sequence.addAnimation(flash)

        self._track_animation(
            sequence,
            finalizer=lambda: self._finalize_find(snapshot, positions, found_item, restore_colors),
        )

    # ---------- Found-node highlight ----------

    @property
    def highlight_pending(self) -> bool:
        return self._highlight_timer.isActive()

    def highlight_node(self, node_id):
        """Paint ``node_id`` as found until the highlight timer runs out."""
        self.cancel_highlight()
        item = self.node_items.get(node_id)
        if item is None:
            return
        item.setFillColor(QColor(FOUND_COLOR))
        self._highlighted = item
        self._highlight_timer.start(self.anim.global_ctrl.scale_duration(HIGHLIGHT_MS))

    def cancel_highlight(self):
        self._highlight_timer.stop()
        self._clear_highlight()

    def _clear_highlight(self):
        item, self._highlighted = self._highlighted, None
        if item is None:
            return
        # the item may already be gone with its scene
        try:
            if item.scene():
                item.setFillColor(QColor(BSTNodeItem.default_fill))
        except RuntimeError:
            pass

    # ---------- Internal helpers ----------

    def _finalize_find(self, snapshot, positions, found_item, restore_colors):
        for item, color in restore_colors:
            if item and item.scene():
                item.setFillColor(color)
        self._finalize_snapshot(snapshot, positions)
        if found_item is not None and found_item.scene():
            self.highlight_node(found_item.node_id)

    def _create_node_item(self, node_id, value):
        node_item = BSTNodeItem(node_id, value)
        node_item.contextDelete.connect(self.deleteRequested.emit)
        node_item.contextFind.connect(self.findRequested.emit)
        self.scene.addItem(node_item)
        self.node_items[node_id] = node_item
        return node_item

    def _compute_layout(self, snapshot) -> Dict[int, QPointF]:
        positions = compute_layout(snapshot, node_width=BSTNodeItem.width)
        return {node_id: QPointF(x, y) for node_id, (x, y) in positions.items()}

    @staticmethod
    def _node_info(snapshot, node_id):
        for node in snapshot["nodes"]:
            if node["id"] == node_id:
                return node
        raise KeyError(node_id)

    def _build_path_flash(
        self,
        path_ids: List[int],
        restore_store: Optional[List[tuple]] = None,
        duration_scale: float = 1.0,
    ):
        if not path_ids:
            return None
        duration = int(240 * duration_scale)
        seq = self.anim.sequential()
        for node_id in path_ids:
            item = self.node_items.get(node_id)
            if not item:
                continue
            original_color = QColor(item.fillColor)
            if restore_store is not None:
                restore_store.append((item, original_color))
            seq.addAnimation(
                self.anim.flash_brush(
                    setter=item.setFillColor,
                    start_color=original_color,
                    end_color=QColor(PATH_COLOR),
                    duration=duration,
                    loops=1,
                )
            )
        return seq

    def _animate_relayout(self, positions, skip_ids: Optional[Set[int]] = None):
        if not positions:
            return None
        skip_ids = skip_ids or set()
        motions = [
            self.anim.move_item(item, positions[node_id], duration=480)
            for node_id, item in self.node_items.items()
            if node_id not in skip_ids and node_id in positions
        ]
        if not motions:
            return None
        return self.anim.parallel(*motions)

    def _finalize_snapshot(self, snapshot, positions):
        keep_ids = {node["id"] for node in snapshot["nodes"]}
        for node_id in list(self.node_items.keys()):
            if node_id not in keep_ids:
                item = self.node_items.pop(node_id)
                if item.scene():
                    self.scene.removeItem(item)

        for info in snapshot["nodes"]:
            node_item = self.node_items.get(info["id"])
            if not node_item:
                node_item = self._create_node_item(info["id"], info["value"])
            node_item.setOpacity(1.0)
            node_item.set_value(info["value"])
            if info["id"] in positions:
                node_item.setPos(positions[info["id"]])

        self._rebuild_edges(snapshot)
        self.auto_fit_view()
        self._ensure_small_tree_centered()

    def _ensure_small_tree_centered(self):
        if not self._canvas or len(self.node_items) == 0 or len(self.node_items) > 2:
            return

        bounds = self.scene.itemsBoundingRect()
        if bounds.isNull():
            return

        margin = 150
        rect = bounds.adjusted(-margin, -margin, margin, margin)

        min_size = 320
        if rect.width() < min_size:
            center_x = rect.center().x()
            rect.setLeft(center_x - min_size / 2)
            rect.setRight(center_x + min_size / 2)
        if rect.height() < min_size:
            center_y = rect.center().y()
            rect.setTop(center_y - min_size / 2)
            rect.setBottom(center_y + min_size / 2)

        self.scene.setSceneRect(rect)
        self._canvas.centerOn(rect.center())

    def _finalize_delete(self, snapshot, positions, restore_colors):
        for item, color in restore_colors:
            if item and item.scene():
                item.setFillColor(color)
        self._finalize_snapshot(snapshot, positions)

    def _rebuild_edges(self, snapshot):
        for edge in list(self.edge_items.values()):
            self.scene.removeItem(edge)
        self.edge_items.clear()

        for info in snapshot["nodes"]:
            parent_id = info["id"]
            for child_key in ("left", "right"):
                child_id = info[child_key]
                if child_id is None:
                    continue
                parent_item = self.node_items.get(parent_id)
                child_item = self.node_items.get(child_id)
                if not parent_item or not child_item:
                    continue
                edge = BSTEdgeItem(parent_item, child_item)
                self.scene.addItem(edge)
                self.edge_items[(parent_id, child_id)] = edge

    @staticmethod
    def _stage_position(item: "BSTNodeItem") -> QPointF:
        gap = BSTNodeItem.width + 26
        return QPointF(item.pos().x() + gap, item.pos().y())

    def _edge_flash_animation(
        self,
        parent_item: Optional["BSTNodeItem"],
        child_item: Optional["BSTNodeItem"],
        target_center: Optional[QPointF],
        storage: List["EdgeFlashItem"],
    ):
        highlight = self._create_temp_edge_item(parent_item, child_item, target_center)
        if not highlight:
            return None
        storage.append(highlight)
        seq = self.anim.sequential()
        seq.addAnimation(self.anim.fade_item(highlight, 0.0, 1.0, duration=240))
        seq.addAnimation(self.anim.fade_item(highlight, 1.0, 0.0, duration=240))
        return seq

    def _create_temp_edge_item(
        self,
        parent_item: Optional["BSTNodeItem"],
        child_item: Optional["BSTNodeItem"],
        target_center: Optional[QPointF],
    ):
        if not parent_item:
            return None
        start = self._node_center(parent_item)

        if child_item:
            end = self._node_center(child_item)
        elif target_center:
            end = target_center
        else:
            return None

        direction = end - start
        length = math.hypot(direction.x(), direction.y())
        if length < 1e-3:
            return None

        inset = BSTNodeItem.width / 2
        ux = direction.x() / length
        uy = direction.y() / length
        start_point = start + QPointF(ux * inset, uy * inset)
        end_point = end - QPointF(ux * inset, uy * inset)

        path = QPainterPath(QPointF(0.0, 0.0))
        path.lineTo(QPointF(end_point.x() - start_point.x(), end_point.y() - start_point.y()))

        item = EdgeFlashItem(path)
        item.setPos(start_point)
        self.scene.addItem(item)
        return item

    @staticmethod
    def _node_center(node_item: "BSTNodeItem"):
        pos = node_item.pos()
        return QPointF(pos.x() + BSTNodeItem.width / 2, pos.y() + BSTNodeItem.height / 2)

    @staticmethod
    def _center_from_position(position: QPointF):
        return QPointF(position.x() + BSTNodeItem.width / 2, position.y() + BSTNodeItem.height / 2)

    def _finalize_insert_animation(self, snapshot, positions, temp_items):
        for item in temp_items:
            if item and item.scene():
                self.scene.removeItem(item)
        self._finalize_snapshot(snapshot, positions)

    def _show_background_menu(self, screen_pos):
        if isinstance(screen_pos, QPointF):
            screen_pos = screen_pos.toPoint()
        menu = QMenu()
        clear_action = menu.addAction("Clear Tree")
        if menu.exec_(screen_pos) == clear_action:
            self.clearRequested.emit()

    def eventFilter(self, watched, event):
        if watched is self.scene and event.type() == QEvent.GraphicsSceneContextMenu:
            item = self.scene.itemAt(
                event.scenePos(),
                self._canvas.transform() if self._canvas else None,
            )
            if item is None:
                self._show_background_menu(event.screenPos())
                event.accept()
                return True
        return super().eventFilter(watched, event)


class BSTNodeItem(QGraphicsObject):
    contextDelete = pyqtSignal(int)
    contextFind = pyqtSignal(int)
    positionChanged = pyqtSignal()

    width = 70
    height = 70
    default_fill = "#e9e9ef"

    def __init__(self, node_id, value):
        super().__init__()
        self.node_id = node_id
        self._value = str(value)
        self.fillColor = QColor(self.default_fill)
        self.strokeColor = QColor("#4a4a52")
        self.textColor = QColor("#1f1f24")
        self.setZValue(2)
        self.setFlag(QGraphicsItem.ItemIsSelectable, True)
        self.setFlag(QGraphicsItem.ItemSendsGeometryChanges, True)

    def boundingRect(self):
        return QRectF(0, 0, self.width, self.height)

    def paint(self, painter, option, widget=None):
        painter.setRenderHint(painter.Antialiasing)
        painter.setPen(QPen(self.strokeColor, 2))
        painter.setBrush(QBrush(self.fillColor))
        painter.drawEllipse(self.boundingRect())

        painter.setPen(self.textColor)
        painter.drawText(self.boundingRect(), Qt.AlignCenter, self._value)

    def set_value(self, value):
        self._value = str(value)
        self.update()

    def setFillColor(self, color: QColor):
        self.fillColor = QColor(color)
        self.update()

    def contextMenuEvent(self, event):
        menu = QMenu()
        delete_action = menu.addAction("Delete Node")
        find_action = menu.addAction("Find Node")
        chosen = menu.exec_(event.screenPos())
        if chosen == delete_action:
            self.contextDelete.emit(self.node_id)
        elif chosen == find_action:
            self.contextFind.emit(self.node_id)

    def itemChange(self, change, value):
        if change == QGraphicsItem.ItemPositionHasChanged:
            self.positionChanged.emit()
        return super().itemChange(change, value)


class BSTEdgeItem(QGraphicsPathItem):
    def __init__(self, parent_item: BSTNodeItem, child_item: BSTNodeItem):
        super().__init__()
        self.parent_item = parent_item
        self.child_item = child_item

        pen = QPen(QColor("#9e9e9e"), 2)
        pen.setCapStyle(Qt.RoundCap)
        pen.setJoinStyle(Qt.RoundJoin)
        self.setPen(pen)
        self.setZValue(1)

        self.parent_item.positionChanged.connect(self.update_geometry)
        self.child_item.positionChanged.connect(self.update_geometry)
        self.update_geometry()

    def update_geometry(self):
        start = self._center(self.parent_item)
        end = self._center(self.child_item)

        direction = end - start
        length = math.hypot(direction.x(), direction.y())
        offset = BSTNodeItem.width / 2

        if length > 1e-6:
            ux = direction.x() / length
            uy = direction.y() / length
            start_point = start + QPointF(ux * offset, uy * offset)
            end_point = end - QPointF(ux * offset, uy * offset)
        else:
            start_point = end_point = start

        path = QPainterPath(start_point)
        path.lineTo(end_point)
        self.setPath(path)

    @staticmethod
    def _center(node_item: BSTNodeItem):
        pos = node_item.scenePos()
        return QPointF(pos.x() + BSTNodeItem.width / 2, pos.y() + BSTNodeItem.height / 2)


class EdgeFlashItem(QGraphicsObject):
    def __init__(self, path: QPainterPath):
        super().__init__()
        self._path = QPainterPath(path)
        self._pen = QPen(QColor("#ff4d4d"), 5)
        self._pen.setCapStyle(Qt.RoundCap)
        self._pen.setJoinStyle(Qt.RoundJoin)
        self.setOpacity(0.0)
        self.setZValue(1.5)
        self.setAcceptedMouseButtons(Qt.NoButton)

    def boundingRect(self):
        return self._path.boundingRect().adjusted(-3, -3, 3, 3)

    def paint(self, painter, option, widget=None):
        painter.setRenderHint(painter.Antialiasing)
        painter.setPen(self._pen)
        painter.drawPath(self._path)
