# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for type normalization and the related-type search order."""

import sys
from types import ModuleType

import pytest

from textdomain.hierarchy import TypeGraph, enclosing_modules, normalize_class, related_types


class Base:
    pass


class Child(Base):
    pass


class Mixin:
    pass


class Combined(Child, Mixin):
    pass


class Meta(type):
    pass


class WithMeta(metaclass=Meta):
    pass


@pytest.fixture
def fake_package(monkeypatch: pytest.MonkeyPatch):
    """A ``fakeapp.widgets`` module pair registered in ``sys.modules``."""
    root = ModuleType("fakeapp")
    widgets = ModuleType("fakeapp.widgets")
    monkeypatch.setitem(sys.modules, "fakeapp", root)
    monkeypatch.setitem(sys.modules, "fakeapp.widgets", widgets)
    widget = type("Widget", (), {"__module__": "fakeapp.widgets"})
    return root, widgets, widget


class TestNormalizeClass:
    def test_class_is_its_own_key(self):
        assert normalize_class(Child) is Child

    def test_instance_collapses_to_class(self):
        assert normalize_class(Child()) is Child

    def test_class_with_metaclass_is_its_own_key(self):
        assert normalize_class(WithMeta) is WithMeta

    def test_module_is_its_own_key(self):
        module = ModuleType("standalone")
        assert normalize_class(module) is module


class TestRelatedTypes:
    def test_most_specific_first(self):
        assert related_types(Child, [Base, Child]) == [Child, Base]

    def test_only_bound_types(self):
        assert related_types(Child, [Base]) == [Base]

    def test_nothing_bound(self):
        assert related_types(Child, []) == []

    def test_follows_mro_for_mixins(self):
        assert related_types(Combined, [Mixin, Base, Combined]) == [Combined, Base, Mixin]

    def test_instance_uses_its_class(self):
        assert related_types(Child(), [Base]) == [Base]

    def test_object_comes_last(self):
        assert related_types(Child, [object, Child, Base]) == [Child, Base, object]

    def test_declared_relations_follow_hierarchy(self):
        graph = TypeGraph()
        graph.declare(Mixin, Base)
        assert related_types(Mixin, [Base, Mixin], graph) == [Mixin, Base]

    def test_declared_relations_of_ancestors_apply(self):
        graph = TypeGraph()
        graph.declare(Base, Mixin)
        assert related_types(Child, [Mixin], graph) == [Mixin]

    def test_enclosing_modules(self, fake_package):
        root, widgets, widget = fake_package
        assert enclosing_modules(widget) == [widgets, root]
        assert enclosing_modules(widgets) == [root]

    def test_modules_after_classes(self, fake_package):
        root, _, widget = fake_package
        assert related_types(widget, [object, root, widget]) == [widget, root, object]


class TestTypeGraph:
    def test_declare_deduplicates_and_skips_self(self):
        graph = TypeGraph()
        graph.declare(Child, Mixin, Mixin, Child)
        assert graph.related(Child) == (Mixin,)

    def test_declare_accepts_instances(self):
        graph = TypeGraph()
        graph.declare(Child(), Mixin())
        assert graph.related(Child) == (Mixin,)

    def test_clear(self):
        graph = TypeGraph()
        graph.declare(Child, Mixin)
        graph.clear()
        assert graph.related(Child) == ()
