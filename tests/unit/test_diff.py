"""
Unit tests for tree diffing: missing keys, changed keys, task collection.
"""

from linguaisync.tree import (
    TaskKind,
    ValueKind,
    collect_tasks,
    filter_changed_against_target,
    find_changed_keys,
    find_missing_keys,
    kind_of,
)


def leaf_paths(tree, prefix=""):
    paths = []
    for key, value in tree.items():
        full = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            paths.extend(leaf_paths(value, full))
        else:
            paths.append(full)
    return paths


class TestValueKinds:

    def test_kinds(self):
        assert kind_of({"a": 1}) is ValueKind.OBJECT
        assert kind_of([1, 2]) is ValueKind.ARRAY
        assert kind_of("x") is ValueKind.SCALAR
        assert kind_of(None) is ValueKind.SCALAR
        assert kind_of(True) is ValueKind.SCALAR
        assert kind_of(1.5) is ValueKind.SCALAR


class TestFindMissingKeys:

    def test_tree_has_no_missing_keys_against_itself(self, sample_tree):
        assert find_missing_keys(sample_tree, sample_tree) == []

    def test_empty_target_yields_every_leaf(self, sample_tree):
        tasks = find_missing_keys(sample_tree, {})

        assert [t.path for t in tasks] == leaf_paths(sample_tree)
        assert all(t.kind is TaskKind.MISSING for t in tasks)

    def test_missing_leaf_in_nested_object(self):
        tasks = find_missing_keys({"a": {"b": "hi", "c": "yo"}}, {"a": {"b": "salut"}})

        assert len(tasks) == 1
        assert tasks[0].path == "a.c"
        assert tasks[0].source_value == "yo"
        assert tasks[0].kind is TaskKind.MISSING

    def test_missing_subtree_is_expanded_into_leaves(self):
        tasks = find_missing_keys({"menu": {"file": {"new": "New", "open": "Open"}}}, {})

        assert [(t.path, t.source_value) for t in tasks] == [
            ("menu.file.new", "New"),
            ("menu.file.open", "Open"),
        ]

    def test_arrays_are_leaves(self):
        tasks = find_missing_keys({"days": ["Mon", "Tue"]}, {})

        assert len(tasks) == 1
        assert tasks[0].source_value == ["Mon", "Tue"]

    def test_scalar_override_counts_as_present(self):
        assert find_missing_keys({"a": {"b": "x"}}, {"a": "flat"}) == []
        assert find_missing_keys({"a": "x"}, {"a": {"b": "nested"}}) == []

    def test_null_base_value_is_a_leaf(self):
        tasks = find_missing_keys({"a": None}, {})
        assert [(t.path, t.source_value) for t in tasks] == [("a", None)]

    def test_is_nested(self):
        tasks = find_missing_keys({"top": "x", "a": {"b": "y"}}, {})
        assert [t.is_nested for t in tasks] == [False, True]


class TestFindChangedKeys:

    def test_changed_leaf(self):
        tasks = find_changed_keys({"a": "hi"}, {"a": "hello"})

        assert len(tasks) == 1
        assert tasks[0].path == "a"
        assert tasks[0].source_value == "hello"
        assert tasks[0].kind is TaskKind.CHANGED

    def test_new_keys_are_not_changes(self):
        assert find_changed_keys({"a": "hi"}, {"a": "hi", "b": "new"}) == []

    def test_removed_keys_are_not_reported(self):
        assert find_changed_keys({"a": "hi", "b": "gone"}, {"a": "hi"}) == []

    def test_key_order_is_irrelevant(self):
        old = {"a": {"x": 1, "y": 2}, "b": "text"}
        new = {"b": "text", "a": {"y": 2, "x": 1}}
        assert find_changed_keys(old, new) == []

    def test_array_change_detected(self):
        tasks = find_changed_keys({"days": ["Mon", "Tue"]}, {"days": ["Mon", "Wed"]})
        assert [t.path for t in tasks] == ["days"]

    def test_type_change_is_a_change(self):
        tasks = find_changed_keys({"a": {"b": "x"}}, {"a": "flat"})
        assert [(t.path, t.source_value) for t in tasks] == [("a", "flat")]

    def test_number_vs_boolean(self):
        assert [t.path for t in find_changed_keys({"a": 1}, {"a": True})] == ["a"]

    def test_nested_change(self):
        tasks = find_changed_keys({"m": {"s": "Save", "o": "Open"}}, {"m": {"s": "Save all", "o": "Open"}})
        assert [t.path for t in tasks] == ["m.s"]


class TestChangedFiltering:

    def test_changed_task_suppressed_when_target_lacks_key(self):
        changed = find_changed_keys({"a": "hi"}, {"a": "hello"})
        assert filter_changed_against_target(changed, {}) == []

    def test_changed_task_kept_when_target_has_key(self):
        changed = find_changed_keys({"a": "hi"}, {"a": "hello"})
        kept = filter_changed_against_target(changed, {"a": "salut"})
        assert [t.path for t in kept] == ["a"]


class TestCollectTasks:

    def test_changed_scenario(self):
        plan = collect_tasks({"a": "hello"}, {"a": "salut"}, {"a": "hi"})

        assert plan.missing == []
        assert [(t.path, t.source_value, t.kind) for t in plan.changed] == [("a", "hello", TaskKind.CHANGED)]
        assert not plan.baseline_missing

    def test_changed_key_absent_from_target_becomes_missing(self):
        plan = collect_tasks({"a": "hello"}, {}, {"a": "hi"})

        assert [t.path for t in plan.missing] == ["a"]
        assert plan.changed == []
        assert len(plan) == 1

    def test_without_snapshot_only_missing_tasks(self):
        plan = collect_tasks({"a": "hello", "b": "new"}, {"a": "salut"}, None)

        assert plan.baseline_missing
        assert plan.changed == []
        assert [t.path for t in plan.tasks] == ["b"]

    def test_tasks_list_missing_first(self):
        plan = collect_tasks({"a": "hello", "b": "new"}, {"a": "salut"}, {"a": "hi"})
        assert [(t.path, t.kind) for t in plan.tasks] == [
            ("b", TaskKind.MISSING),
            ("a", TaskKind.CHANGED),
        ]
