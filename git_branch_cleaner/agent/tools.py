"""Tool registry for driving the branch cleaner from an agent runtime.

Each tool has a name, a description and a JSON Schema for its arguments, the
shape tool-calling LLM APIs expect. ``ToolRegistry.call`` runs a tool and
always returns a ``ToolResult``: errors come back as results with
``is_error`` set instead of exceptions, so the agent can read them.

Deletion tools only act on branches approved by the most recent
``ask_confirmation`` call.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Set

from git_branch_cleaner.config import Policy
from git_branch_cleaner.exceptions import GitOperationError
from git_branch_cleaner.logging_config import get_logger
from git_branch_cleaner.services.branch_classifier import BranchClassifier
from git_branch_cleaner.services.deletion_service import DeletionService
from git_branch_cleaner.services.display_service import DisplayService
from git_branch_cleaner.services.git import GitOperations

logger = get_logger(__name__)

JSON_TYPES = {
    "string": str,
    "boolean": bool,
    "integer": int,
    "array": list,
    "object": dict,
}


@dataclass(frozen=True)
class ToolDefinition:
    """A callable tool the agent can invoke."""

    name: str
    description: str
    parameters: dict  # JSON Schema
    handler: Callable[..., "ToolResult"]

    def to_schema(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.parameters,
        }


@dataclass(frozen=True)
class ToolResult:
    """Structured result of a tool call."""

    payload: Any
    is_error: bool = False

    def to_text(self) -> str:
        return json.dumps(self.payload, indent=2)

    def to_content(self) -> List[dict]:
        return [{"type": "text", "text": self.to_text()}]


def _schema(properties: Optional[dict] = None, required: Optional[List[str]] = None) -> dict:
    return {
        "type": "object",
        "properties": properties or {},
        "required": required or [],
    }


def _branch_name_property(description: str) -> dict:
    return {"branch_name": {"type": "string", "description": description}}


class ToolRegistry:
    """Branch cleaner operations exposed as agent tools."""

    def __init__(
        self,
        git_service: GitOperations,
        policy: Policy,
        display_service: Optional[DisplayService] = None,
    ):
        self.git_service = git_service
        self.policy = policy
        self.display_service = display_service or DisplayService()
        self.deletion_service = DeletionService(git_service, policy)
        self.classifier = BranchClassifier(policy)
        self._confirmed: Set[str] = set()
        self._tools: Dict[str, ToolDefinition] = {}
        self._register_tools()

    def _register(self, name: str, description: str, parameters: dict, handler) -> None:
        self._tools[name] = ToolDefinition(name, description, parameters, handler)

    def _register_tools(self) -> None:
        include_props = {
            "include_local": {
                "type": "boolean",
                "description": "Include local branches (default: true)",
            },
            "include_remote": {
                "type": "boolean",
                "description": "Include remote branches (default: true)",
            },
        }
        self._register(
            "list_branches",
            "List all git branches (local and/or remote) with their last commit dates. "
            "Returns branch name, type, last commit date, and commit hash.",
            _schema(include_props),
            self._list_branches,
        )
        self._register(
            "classify_branches",
            "Classify branches as protected, excluded, eligible for deletion (merged or "
            "stale) or keep, using the configured policy.",
            _schema(include_props),
            self._classify_branches,
        )
        self._register(
            "check_merged_status",
            "Check if a branch has been merged into the main branch.",
            _schema(_branch_name_property("The branch name to check"), ["branch_name"]),
            self._check_merged_status,
        )
        self._register(
            "get_branch_info",
            "Get detailed information about a branch: last commit hash, author, date and message.",
            _schema(_branch_name_property("The branch name to get info for"), ["branch_name"]),
            self._get_branch_info,
        )
        self._register(
            "get_current_branch",
            "Get the name of the currently checked out branch.",
            _schema(),
            self._get_current_branch,
        )
        self._register(
            "get_main_branch",
            "Detect the main branch name for this repository.",
            _schema(),
            self._get_main_branch,
        )
        self._register(
            "ask_confirmation",
            "Ask the user for confirmation before deleting branches. MUST be used before "
            "any delete operation.",
            _schema(
                {
                    "message": {
                        "type": "string",
                        "description": "The confirmation message to display to the user",
                    },
                    "branches_to_delete": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "List of branch names that will be deleted",
                    },
                },
                ["message", "branches_to_delete"],
            ),
            self._ask_confirmation,
        )
        self._register(
            "delete_local_branch",
            "Delete a confirmed local git branch. Use force=true for unmerged branches.",
            _schema(
                {
                    **_branch_name_property("The local branch name to delete"),
                    "force": {
                        "type": "boolean",
                        "description": "Force delete even if not merged (default: false)",
                    },
                },
                ["branch_name"],
            ),
            self._delete_local_branch,
        )
        self._register(
            "delete_remote_branch",
            "Delete a confirmed remote git branch.",
            _schema(
                {
                    **_branch_name_property(
                        "The remote branch name to delete (with or without the remote prefix)"
                    ),
                    "remote": {
                        "type": "string",
                        "description": "The remote name (default: origin)",
                    },
                },
                ["branch_name"],
            ),
            self._delete_remote_branch,
        )

    @property
    def names(self) -> List[str]:
        return list(self._tools)

    def schemas(self) -> List[dict]:
        """Tool definitions in the ``name``/``description``/``input_schema`` format."""
        return [tool.to_schema() for tool in self._tools.values()]

    def _validate(self, tool: ToolDefinition, arguments: dict) -> Optional[str]:
        properties = tool.parameters.get("properties", {})
        for name in tool.parameters.get("required", []):
            if name not in arguments:
                return f"Missing required argument '{name}'"
        for name, value in arguments.items():
            if name not in properties:
                return f"Unknown argument '{name}'"
            expected = JSON_TYPES.get(properties[name].get("type"))
            if expected is int and isinstance(value, bool):
                return f"Argument '{name}' must be of type integer"
            if expected is not None and not isinstance(value, expected):
                return f"Argument '{name}' must be of type {properties[name]['type']}"
        return None

    def call(self, name: str, arguments: Optional[dict] = None) -> ToolResult:
        """Run a tool by name."""
        tool = self._tools.get(name)
        if tool is None:
            return ToolResult({"error": f"Unknown tool '{name}'"}, is_error=True)

        arguments = arguments or {}
        problem = self._validate(tool, arguments)
        if problem:
            return ToolResult({"error": problem}, is_error=True)

        logger.debug(f"Tool call {name}({arguments})")
        try:
            return tool.handler(**arguments)
        except GitOperationError as e:
            logger.debug(f"Tool {name} failed: {e}")
            return ToolResult({"error": e.message or str(e)}, is_error=True)

    def _list_branches(self, include_local: bool = True, include_remote: bool = True) -> ToolResult:
        branches = self.git_service.list_branches(include_local, include_remote)
        return ToolResult({
            "branches": [
                {
                    "name": b.name,
                    "type": b.kind.value,
                    "last_commit_date": b.last_commit_date.isoformat(),
                    "commit_hash": b.commit_hash,
                }
                for b in branches
            ]
        })

    def _classify_branches(
        self, include_local: bool = True, include_remote: bool = True
    ) -> ToolResult:
        main_branch = self.git_service.detect_main_branch()
        now = datetime.now(timezone.utc)
        classified = []
        for branch in self.git_service.list_branches(include_local, include_remote):
            try:
                merged = self.git_service.is_merged_into_main(branch.name, main_branch)
            except GitOperationError as e:
                logger.debug(f"Merge check failed for {branch.name}: {e}")
                merged = None
            result = self.classifier.classify(branch, merged, now)
            classified.append({
                "name": branch.name,
                "type": branch.kind.value,
                "classification": result.classification.value,
                "reason": result.reason.value if result.reason else None,
                "matched_pattern": result.matched_pattern,
                "merged": merged,
                "age_days": result.age_days,
            })
        return ToolResult({
            "main_branch": main_branch,
            "stale_days": self.policy.stale_days,
            "branches": classified,
        })

    def _check_merged_status(self, branch_name: str) -> ToolResult:
        main_branch = self.git_service.detect_main_branch()
        try:
            merged = self.git_service.is_merged_into_main(branch_name, main_branch)
        except GitOperationError as e:
            return ToolResult(
                {"branch": branch_name, "error": e.message or str(e), "merged": False},
                is_error=True,
            )
        return ToolResult({"branch": branch_name, "main_branch": main_branch, "merged": merged})

    def _get_branch_info(self, branch_name: str) -> ToolResult:
        return ToolResult(self.git_service.get_branch_info(branch_name))

    def _get_current_branch(self) -> ToolResult:
        return ToolResult({"current_branch": self.git_service.get_current_branch()})

    def _get_main_branch(self) -> ToolResult:
        return ToolResult({"main_branch": self.git_service.detect_main_branch()})

    def _ask_confirmation(self, message: str, branches_to_delete: List[str]) -> ToolResult:
        confirmed = self.display_service.confirm_deletion(message, branches_to_delete)
        # A new question replaces whatever was approved before
        self._confirmed = set(branches_to_delete) if confirmed else set()
        return ToolResult({
            "confirmed": confirmed,
            "message": "User approved the deletion" if confirmed else "User cancelled the operation",
        })

    def _not_confirmed(self, branch_name: str) -> ToolResult:
        return ToolResult(
            {
                "success": False,
                "branch": branch_name,
                "error": f"Deletion of '{branch_name}' was not confirmed; call ask_confirmation first",
            },
            is_error=True,
        )

    def _delete_local_branch(self, branch_name: str, force: bool = False) -> ToolResult:
        if branch_name not in self._confirmed:
            return self._not_confirmed(branch_name)
        result = self.deletion_service.delete_local_branch(branch_name, force=force)
        return ToolResult(result.to_dict(), is_error=not result.success)

    def _delete_remote_branch(self, branch_name: str, remote: Optional[str] = None) -> ToolResult:
        remote = remote or self.git_service.remote_name
        prefix = f"{remote}/"
        short_name = branch_name[len(prefix):] if branch_name.startswith(prefix) else branch_name
        if branch_name not in self._confirmed and f"{prefix}{short_name}" not in self._confirmed:
            return self._not_confirmed(branch_name)
        result = self.deletion_service.delete_remote_branch(short_name, remote)
        return ToolResult(result.to_dict(), is_error=not result.success)
