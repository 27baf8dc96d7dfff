"""Tests for the activation/reveal/keyboard selection state machine."""

from __future__ import annotations

import itertools
import unittest

from projecttree.selection import FocusRestore, SelectionController
from projecttree.tree_model import Expansion, NodeKind, Selection, TreeNode, TreeStore


class _Recorder:
    def __init__(self) -> None:
        self.tree_changes = 0
        self.selections: list[tuple[str, bool]] = []

    def on_tree_changed(self) -> None:
        self.tree_changes += 1

    def on_selection_changed(self, node: TreeNode, is_toggle: bool) -> None:
        self.selections.append((node.id, is_toggle))


def _build_store(recorder: _Recorder | None = None) -> TreeStore:
    kwargs = {}
    if recorder is not None:
        kwargs = {
            "on_tree_changed": recorder.on_tree_changed,
            "on_selection_changed": recorder.on_selection_changed,
        }
    store = TreeStore(root_path="/proj", **kwargs)
    src = store.root.append_child(TreeNode("/proj/src", NodeKind.DIRECTORY))
    store.root.append_child(TreeNode("/proj/README.md"))
    main = src.append_child(TreeNode("/proj/src/main", NodeKind.DIRECTORY))
    src.append_child(TreeNode("/proj/src/app.py"))
    main.append_child(TreeNode("/proj/src/main/entry.py"))
    store.root.append_child(TreeNode("/proj/locked.txt", disabled=True))
    return store


def _selected_ids(store: TreeStore) -> list[str]:
    return [node.id for node in store.selected_nodes()]


class ActivateTests(unittest.TestCase):
    def test_row_activation_selects_and_expands(self) -> None:
        recorder = _Recorder()
        store = _build_store(recorder)
        controller = SelectionController(store)
        src = store.find_by_id("/proj/src")

        self.assertIs(controller.activate(src), src)

        self.assertIs(src.expansion, Expansion.EXPANDED)
        self.assertIs(src.selection, Selection.SELECTED)
        self.assertIs(controller.last_activated, src)
        self.assertEqual(recorder.selections, [("/proj/src", False)])
        self.assertEqual(recorder.tree_changes, 1)

    def test_reselecting_expanded_branch_does_not_collapse_it(self) -> None:
        store = _build_store()
        controller = SelectionController(store)
        src = store.find_by_id("/proj/src")
        controller.activate(src)
        controller.activate(src)
        self.assertIs(src.expansion, Expansion.EXPANDED)
        self.assertIs(src.selection, Selection.SELECTED)

    def test_single_selection_holds_after_every_activation(self) -> None:
        store = _build_store()
        controller = SelectionController(store)
        nodes = [node for node in store.iter_nodes() if node is not store.root]
        for node in itertools.chain(nodes, reversed(nodes), nodes[::2]):
            controller.activate(node, False, False)
            selected = store.selected_nodes()
            self.assertLessEqual(len(selected), 1)
            if not node.disabled:
                self.assertEqual(selected, [node])

    def test_disabled_node_clears_selection_without_being_selected(self) -> None:
        recorder = _Recorder()
        store = _build_store(recorder)
        controller = SelectionController(store)
        readme = store.find_by_id("/proj/README.md")
        locked = store.find_by_id("/proj/locked.txt")
        controller.activate(readme)

        controller.activate(locked)

        self.assertEqual(_selected_ids(store), [])
        self.assertIs(locked.expansion, Expansion.EXPANDED)
        self.assertIs(controller.last_activated, readme)
        self.assertEqual(recorder.selections[-1], ("/proj/locked.txt", False))

    def test_selecting_closed_leaf_collapses_stale_expanded_leaves(self) -> None:
        store = _build_store()
        controller = SelectionController(store)
        readme = store.find_by_id("/proj/README.md")
        app = store.find_by_id("/proj/src/app.py")
        src = store.find_by_id("/proj/src")

        controller.activate(readme)
        self.assertIs(readme.expansion, Expansion.EXPANDED)
        controller.activate(app)

        self.assertIs(readme.expansion, Expansion.COLLAPSED)
        self.assertIs(app.expansion, Expansion.EXPANDED)
        self.assertIs(src.expansion, Expansion.COLLAPSED)

    def test_activate_none_is_noop(self) -> None:
        recorder = _Recorder()
        controller = SelectionController(_build_store(recorder))
        self.assertIsNone(controller.activate(None))
        self.assertEqual(recorder.tree_changes, 0)

    def test_force_collapse_first_reopens_expanded_node(self) -> None:
        store = _build_store()
        controller = SelectionController(store)
        src = store.find_by_id("/proj/src")
        src.expansion = Expansion.EXPANDED
        controller.activate(src, is_toggle_gesture=True, force_collapse_first=True)
        self.assertIs(src.expansion, Expansion.EXPANDED)

    def test_batched_transitions_coalesce_into_one_render(self) -> None:
        recorder = _Recorder()
        store = _build_store(recorder)
        controller = SelectionController(store)
        with store.batch():
            controller.activate(store.find_by_id("/proj/src"))
            controller.activate(store.find_by_id("/proj/src/app.py"))
            controller.activate(store.find_by_id("/proj/src"), is_toggle_gesture=True)
        self.assertEqual(recorder.tree_changes, 1)
        self.assertEqual(len(recorder.selections), 3)


class ToggleTests(unittest.TestCase):
    def test_toggle_twice_restores_expansion(self) -> None:
        store = _build_store()
        controller = SelectionController(store)
        for node in store.iter_nodes():
            original = node.expansion
            controller.activate(node, True, False)
            controller.activate(node, True, False)
            self.assertIs(node.expansion, original)

    def test_toggle_never_changes_selection(self) -> None:
        recorder = _Recorder()
        store = _build_store(recorder)
        controller = SelectionController(store)
        app = store.find_by_id("/proj/src/app.py")
        controller.activate(app)
        before = {node.id: node.selection for node in store.iter_nodes()}

        for node in list(store.iter_nodes()):
            controller.activate(node, is_toggle_gesture=True)
            self.assertEqual({n.id: n.selection for n in store.iter_nodes()}, before)

        self.assertTrue(all(is_toggle for _id, is_toggle in recorder.selections[1:]))

    def test_activate_address_resolves_view_reference(self) -> None:
        store = _build_store()
        controller = SelectionController(store)
        node = controller.activate_address("0.1")
        self.assertEqual(node.id, "/proj/src/app.py")
        self.assertIs(node.selection, Selection.SELECTED)

    def test_activate_stale_address_is_noop(self) -> None:
        recorder = _Recorder()
        store = _build_store(recorder)
        controller = SelectionController(store)
        self.assertIsNone(controller.activate_address("9.9"))
        self.assertIsNone(controller.activate_address("bogus"))
        self.assertIsNone(controller.activate_address(""))
        self.assertEqual(recorder.tree_changes, 0)


class RevealTests(unittest.TestCase):
    def test_reveal_expands_and_selects_only_target(self) -> None:
        store = _build_store()
        controller = SelectionController(store)
        controller.activate(store.find_by_id("/proj/README.md"))
        target = store.find_by_id("/proj/src/main")

        revealed = controller.reveal("/proj/src/main")

        self.assertIs(revealed, target)
        self.assertIs(target.expansion, Expansion.EXPANDED)
        self.assertIs(target.selection, Selection.SELECTED)
        self.assertEqual(_selected_ids(store), ["/proj/src/main"])

    def test_reveal_of_already_selected_expanded_node_keeps_state(self) -> None:
        store = _build_store()
        controller = SelectionController(store)
        target = store.find_by_id("/proj/src/main")
        target.expansion = Expansion.EXPANDED
        target.selection = Selection.SELECTED
        store.find_by_id("/proj/README.md").selection = Selection.SELECTED

        controller.reveal("/proj/src/main")

        self.assertIs(target.expansion, Expansion.EXPANDED)
        self.assertEqual(_selected_ids(store), ["/proj/src/main"])

    def test_reveal_does_not_expand_ancestors(self) -> None:
        # Literal behaviour: only the node itself is opened.
        store = _build_store()
        controller = SelectionController(store)
        controller.reveal("/proj/src/main/entry.py")
        self.assertIs(store.find_by_id("/proj/src").expansion, Expansion.COLLAPSED)
        self.assertIs(store.find_by_id("/proj/src/main").expansion, Expansion.COLLAPSED)

    def test_expand_ancestors_opens_breadcrumb(self) -> None:
        store = _build_store()
        controller = SelectionController(store)
        entry = store.find_by_id("/proj/src/main/entry.py")
        self.assertEqual(controller.expand_ancestors(entry), 2)
        self.assertIs(store.find_by_id("/proj/src").expansion, Expansion.EXPANDED)
        self.assertIs(store.find_by_id("/proj/src/main").expansion, Expansion.EXPANDED)
        self.assertIs(store.root.expansion, Expansion.COLLAPSED)
        self.assertEqual(controller.expand_ancestors(entry), 0)

    def test_reveal_unknown_id_returns_none(self) -> None:
        recorder = _Recorder()
        controller = SelectionController(_build_store(recorder))
        self.assertIsNone(controller.reveal("/proj/nope"))
        self.assertEqual(recorder.tree_changes, 0)


class KeyboardActivateTests(unittest.TestCase):
    def test_keyboard_activate_toggles_and_reports_focus_row(self) -> None:
        store = _build_store()
        controller = SelectionController(store)
        readme = store.find_by_id("/proj/README.md")
        controller.activate(readme)
        src = store.find_by_id("/proj/src")

        restore = controller.keyboard_activate(src)

        self.assertIsInstance(restore, FocusRestore)
        self.assertEqual(restore.row_index, 0)
        self.assertIs(restore.node, src)
        self.assertIs(src.expansion, Expansion.EXPANDED)
        self.assertEqual(_selected_ids(store), ["/proj/README.md"])

    def test_keyboard_activate_reports_node_now_at_focused_position(self) -> None:
        store = _build_store()
        controller = SelectionController(store)
        src = store.find_by_id("/proj/src")
        src.expansion = Expansion.EXPANDED
        # Rows: src, main, app.py, README.md, locked.txt -> focus README.md (index 3).
        readme = store.find_by_id("/proj/README.md")
        restore = controller.keyboard_activate(readme)
        self.assertEqual(restore.row_index, 3)
        self.assertIs(restore.node, readme)

    def test_keyboard_activate_hidden_node_has_no_focus_row(self) -> None:
        store = _build_store()
        controller = SelectionController(store)
        hidden = store.find_by_id("/proj/src/app.py")
        restore = controller.keyboard_activate(hidden)
        self.assertEqual(restore, FocusRestore(row_index=None, node=None))
        self.assertIs(hidden.expansion, Expansion.EXPANDED)

    def test_keyboard_activate_none(self) -> None:
        controller = SelectionController(_build_store())
        self.assertEqual(controller.keyboard_activate(None), FocusRestore(row_index=None, node=None))


if __name__ == "__main__":
    unittest.main()
