"""Shared helper library prepended to every generated script.

The helpers cover three concerns: tagged failures (so the gateway can raise
typed errors), entity serialization into plain records, and identifier
lookup with the disambiguation rules for tags.
"""

from __future__ import annotations

import string

from omnifocus_mcp.core.omnifocus.store import Store

_HELPERS = string.Template(
    r"""
function fail(kind, message, details) {
  const error = new Error(message);
  error.kind = kind;
  if (details) {
    error.details = details;
  }
  throw error;
}

function isoOrNull(date) {
  return date ? date.toISOString() : null;
}

function latestDate(dates) {
  let latest = null;
  for (const date of dates) {
    if (date && (latest === null || date > latest)) {
      latest = date;
    }
  }
  return latest;
}

function namesOf(items) {
  return items.map(item => item.name);
}

function projectStatusToString(status) {
  if (status === Project.Status.Active) return "active";
  if (status === Project.Status.OnHold) return "on hold";
  return "dropped";
}

function stringToProjectStatus(value) {
  if (value === "active") return Project.Status.Active;
  if (value === "on hold") return Project.Status.OnHold;
  if (value === "dropped") return Project.Status.Dropped;
  fail("validation", "Invalid project status: " + value, { field: "status" });
}

function tagStatusToString(status) {
  if (status === Tag.Status.Active) return "active";
  if (status === Tag.Status.OnHold) return "on hold";
  return "dropped";
}

function stringToTagStatus(value) {
  if (value === "active") return Tag.Status.Active;
  if (value === "on hold") return Tag.Status.OnHold;
  if (value === "dropped") return Tag.Status.Dropped;
  fail("validation", "Invalid tag status: " + value, { field: "status" });
}

function folderStatusToString(status) {
  if (status === Folder.Status.Active) return "active";
  return "dropped";
}

function serializeTask(task) {
  const containingProject = task.containingProject;
  return {
    id: task.id.primaryKey,
    name: task.name,
    note: task.note || null,
    completed: task.completed,
    dropped: task.taskStatus === Task.Status.Dropped,
    effectivelyActive: !task.completed && task.effectiveActive,
    flagged: task.flagged,
    project: containingProject ? containingProject.name : null,
    tags: namesOf(task.tags),
    defer: isoOrNull(task.deferDate),
    due: isoOrNull(task.dueDate),
    estimatedMinutes: task.estimatedMinutes || null,
    completionDate: isoOrNull(task.completionDate),
    added: isoOrNull(task.added),
    modified: isoOrNull(task.modified)
  };
}

function serializeProject(project) {
  const folder = project.parentFolder;
  const allTasks = project.flattenedTasks;
  const remainingTasks = allTasks.filter(task => !task.completed);
  return {
    id: project.id.primaryKey,
    name: project.name,
    note: project.note || null,
    status: projectStatusToString(project.status),
    folder: folder ? folder.name : null,
    sequential: project.sequential,
    taskCount: allTasks.length,
    remainingCount: remainingTasks.length,
    tags: namesOf(project.tags)
  };
}

function serializeProjectFacts(project) {
  const record = serializeProject(project);
  const folder = project.parentFolder;
  record.folderActive = folder ? folder.effectiveActive : true;
  return record;
}

function tagPath(tag) {
  const names = [];
  let current = tag;
  while (current) {
    names.unshift(current.name);
    current = current.parent;
  }
  return names.join("/");
}

function serializeTag(tag, activeOnly) {
  const tasks = activeOnly ? tag.remainingTasks : tag.tasks;
  const stamps = [tag.added, tag.modified];
  for (const task of tasks) {
    stamps.push(task.added, task.modified, task.completionDate);
  }
  return {
    id: tag.id.primaryKey,
    name: tag.name,
    taskCount: tasks.length,
    remainingTaskCount: tag.remainingTasks.length,
    added: isoOrNull(tag.added),
    modified: isoOrNull(tag.modified),
    lastActivity: isoOrNull(latestDate(stamps)),
    active: tag.active,
    status: tagStatusToString(tag.status),
    parent: tag.parent ? tag.parent.name : null,
    children: namesOf(tag.children),
    allowsNextAction: tag.allowsNextAction
  };
}

function serializeFolder(folder, includeDropped) {
  const projects = folder.flattenedProjects;
  const remainingProjects = projects.filter(project =>
    project.status === Project.Status.Active || project.status === Project.Status.OnHold
  );
  const children = [];
  for (const child of folder.folders) {
    if (!includeDropped && !child.effectiveActive) continue;
    children.push(serializeFolder(child, includeDropped));
  }
  return {
    id: folder.id.primaryKey,
    name: folder.name,
    status: folderStatusToString(folder.status),
    effectivelyActive: folder.effectiveActive,
    parent: folder.parent ? folder.parent.name : null,
    projectCount: projects.length,
    remainingProjectCount: remainingProjects.length,
    folderCount: folder.folders.length,
    children: children
  };
}

function findByIdOrName(collection, identifier, kind) {
  for (const item of collection) {
    if (item.id.primaryKey === identifier || item.name === identifier) {
      return item;
    }
  }
  fail("not_found", kind + " not found: " + identifier, { kind: kind, identifier: identifier });
}

function findByName(collection, name, kind) {
  for (const item of collection) {
    if (item.name === name) {
      return item;
    }
  }
  fail("not_found", kind + " not found: " + name, { kind: kind, identifier: name });
}

function findTask(identifier) {
  return findByIdOrName($tasks, identifier, "Task");
}

function findProject(identifier) {
  return findByIdOrName($projects, identifier, "Project");
}

function findFolder(identifier) {
  return findByIdOrName($folders, identifier, "Folder");
}

function findTag(identifier) {
  for (const tag of $tags) {
    if (tag.id.primaryKey === identifier) {
      return tag;
    }
  }
  if (identifier.indexOf("/") !== -1) {
    for (const tag of $tags) {
      if (tagPath(tag) === identifier) {
        return tag;
      }
    }
    fail("not_found", "Tag not found: " + identifier, { kind: "Tag", identifier: identifier });
  }
  const matches = $tags.filter(tag => tag.name === identifier);
  if (matches.length === 0) {
    fail("not_found", "Tag not found: " + identifier, { kind: "Tag", identifier: identifier });
  }
  if (matches.length === 1) {
    return matches[0];
  }
  const candidates = matches.map(tag => tagPath(tag) + " (id: " + tag.id.primaryKey + ")");
  fail(
    "ambiguous",
    "Multiple tags named \"" + identifier + "\" found: " + candidates.join(", ") +
      ". Use the full path or the id to pick one.",
    { candidates: candidates }
  );
}

function resolveTags(identifiers) {
  return identifiers.map(identifier => findTag(identifier));
}

function assignTags(target, tags) {
  for (const tag of tags) {
    target.addTag(tag);
  }
}

function replaceTagsOn(target, tags) {
  target.clearTags();
  assignTags(target, tags);
}

const BUILT_IN_PERSPECTIVES = {
  inbox: Perspective.BuiltIn.Inbox,
  flagged: Perspective.BuiltIn.Flagged,
  forecast: Perspective.BuiltIn.Forecast,
  projects: Perspective.BuiltIn.Projects,
  tags: Perspective.BuiltIn.Tags,
  nearby: Perspective.BuiltIn.Nearby,
  review: Perspective.BuiltIn.Review
};

function showPerspective(name) {
  const windows = $document.windows;
  if (windows.length === 0) {
    fail("precondition", "No OmniFocus window is open. Please open an OmniFocus window and try again.");
  }
  const win = windows[0];
  const builtIn = BUILT_IN_PERSPECTIVES[name.toLowerCase()];
  if (builtIn) {
    win.perspective = builtIn;
  } else {
    const custom = Perspective.Custom.byName(name);
    if (!custom) {
      fail("not_found", "Perspective not found: " + name, { kind: "Perspective", identifier: name });
    }
    win.perspective = custom;
  }
  return win;
}

function collectWindowTasks(win) {
  const content = win.content;
  if (!content) {
    fail("precondition", "No content available in the OmniFocus window");
  }
  const tasks = [];
  content.rootNode.apply(node => {
    if (node.object instanceof Task) {
      tasks.push(serializeTask(node.object));
    }
  });
  return tasks;
}
"""
)

HELPER_NAMES = frozenset(
    {
        "fail",
        "isoOrNull",
        "serializeTask",
        "serializeProject",
        "serializeProjectFacts",
        "serializeTag",
        "serializeFolder",
        "tagPath",
        "findByIdOrName",
        "findByName",
        "findTask",
        "findProject",
        "findFolder",
        "findTag",
        "resolveTags",
        "assignTags",
        "replaceTagsOn",
        "stringToProjectStatus",
        "stringToTagStatus",
        "showPerspective",
        "collectWindowTasks",
    }
)


def render_helpers(store: Store) -> str:
    """Render the helper library against *store*'s collection names."""
    return _HELPERS.substitute(
        tasks=store.tasks,
        projects=store.projects,
        tags=store.tags,
        folders=store.folders,
        document=store.document,
    ).strip()
