"""Generate the JXA programs that query Things3 and OmniFocus.

Every generated program has the same shape: the filter spec is embedded once
as an escaped JSON string literal, the backend body selects items, and the
program evaluates to a JSON string that ``osascript`` prints on stdout:

* an array of ``{"id": ..., "name": ...}`` records, or
* ``{"notFound": {"kind": "project" | "area", "name": ...}}`` when a named
  project or every named area is missing.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Dict, List

from .search_filters import FilterSpec
from .utils import escape_script_string

__all__ = [
    "Backend",
    "UnknownBackendError",
    "available_backends",
    "build_query_script",
    "get_backend",
]

SPEC_PLACEHOLDER = "__FILTER_SPEC__"
BODY_PLACEHOLDER = "__BACKEND_BODY__"


class UnknownBackendError(ValueError):
    """Raised for a backend name that has no registered task manager."""


@dataclass(frozen=True)
class Backend:
    name: str
    application: str
    link_template: str
    script_body: str


_SCRIPT_TEMPLATE = """(() => {
    const spec = JSON.parse('__FILTER_SPEC__');
    const anyOf = (names, wanted) => names.some(name => wanted.includes(name));
    const records = (items) => items.map(item => ({ id: String(item.id()), name: String(item.name()) }));
    const notFound = (kind, name) => JSON.stringify({ notFound: { kind: kind, name: name } });
__BACKEND_BODY__
})();
"""

_THINGS_BODY = """
    const Things = Application('Things3');
    const tagList = (item) => {
        const raw = item.tagNames();
        return raw ? raw.split(',').map(tag => tag.trim()).filter(tag => tag.length > 0) : [];
    };
    const areaName = (item) => {
        const area = item.area();
        return area ? area.name() : null;
    };
    const isOpen = (item) => item.status() === 'open';

    if (spec.areas.length > 0) {
        const known = Things.areas().map(area => area.name());
        if (!anyOf(spec.areas, known)) {
            return notFound('area', spec.areas.join(', '));
        }
    }

    let items;
    if (spec.type === 'project') {
        items = Things.projects();
        if (spec.areas.length > 0) {
            items = items.filter(project => spec.areas.includes(areaName(project)));
        }
    } else {
        if (spec.project) {
            const projects = Things.projects.whose({ name: spec.project })();
            if (projects.length === 0) {
                return notFound('project', spec.project);
            }
            items = projects[0].toDos();
        } else {
            // to dos of the application include projects
            items = Things.toDos().filter(item => item.class() !== 'project');
        }
        if (spec.areas.length > 0) {
            items = items.filter(task => {
                let name = areaName(task);
                if (name === null) {
                    const project = task.project();
                    name = project ? areaName(project) : null;
                }
                return spec.areas.includes(name);
            });
        }
    }

    if (spec.tags.length > 0) {
        items = items.filter(item => anyOf(tagList(item), spec.tags));
    }
    items = items.filter(isOpen);
    return JSON.stringify(records(items));"""

_OMNIFOCUS_BODY = """
    const doc = Application('OmniFocus').defaultDocument;
    const tagList = (item) => item.tags().map(tag => tag.name());
    const folderChain = (folder) => {
        const names = [];
        let current = folder;
        while (current) {
            names.push(current.name());
            let parent = null;
            try {
                parent = current.container();
            } catch (e) {
                parent = null;
            }
            current = (parent && parent.class() === 'folder') ? parent : null;
        }
        return names;
    };
    const projectFolders = (project) => project ? folderChain(project.folder()) : [];
    const isOpenProject = (project) => project.status() === 'active status';
    const isOpenTask = (task) => !task.completed() && !task.dropped();

    if (spec.areas.length > 0) {
        const known = doc.flattenedFolders().map(folder => folder.name());
        if (!anyOf(spec.areas, known)) {
            return notFound('area', spec.areas.join(', '));
        }
    }

    let items;
    if (spec.type === 'project') {
        items = doc.flattenedProjects();
        if (spec.areas.length > 0) {
            items = items.filter(project => anyOf(projectFolders(project), spec.areas));
        }
        if (spec.tags.length > 0) {
            items = items.filter(project => anyOf(tagList(project), spec.tags));
        }
        items = items.filter(isOpenProject);
    } else {
        if (spec.project) {
            const projects = doc.flattenedProjects.whose({ name: spec.project })();
            if (projects.length === 0) {
                return notFound('project', spec.project);
            }
            items = projects[0].flattenedTasks();
        } else {
            items = doc.flattenedTasks();
        }
        if (spec.areas.length > 0) {
            items = items.filter(task => anyOf(projectFolders(task.containingProject()), spec.areas));
        }
        if (spec.tags.length > 0) {
            items = items.filter(task => anyOf(tagList(task), spec.tags));
        }
        items = items.filter(isOpenTask);
    }
    return JSON.stringify(records(items));"""


BACKENDS: Dict[str, Backend] = {
    "things": Backend(
        name="things",
        application="Things3",
        link_template="things:///show?id={id}",
        script_body=_THINGS_BODY,
    ),
    "omnifocus": Backend(
        name="omnifocus",
        application="OmniFocus",
        link_template="omnifocus:///task/{id}",
        script_body=_OMNIFOCUS_BODY,
    ),
}


def available_backends() -> List[str]:
    return sorted(BACKENDS)


def get_backend(name: str) -> Backend:
    key = (name or "").strip().lower()
    try:
        return BACKENDS[key]
    except KeyError:
        raise UnknownBackendError(
            f"Unknown backend {name!r}; expected one of: {', '.join(available_backends())}"
        ) from None


def spec_literal(spec: FilterSpec) -> str:
    """The filter spec as the body of a single-quoted JS string literal."""
    return escape_script_string(json.dumps(spec.to_payload(), ensure_ascii=True))


def build_query_script(spec: FilterSpec, backend: Backend) -> str:
    """Return the complete JXA program for *spec* against *backend*."""
    script = _SCRIPT_TEMPLATE.replace(BODY_PLACEHOLDER, backend.script_body)
    return script.replace(SPEC_PLACEHOLDER, spec_literal(spec), 1)
