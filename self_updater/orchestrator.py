"""Update orchestrator: fetch, inspect, pull, install and build.

Lifecycle:
1. Verify the ``origin`` remote and resolve the target branch
2. Fetch and compare the local HEAD with the remote branch tip
3. Summarise the incoming changes (files, size, commits, line counts)
4. Pull, install dependencies, build
5. Report completion; the application must be restarted by the caller

Every step reports through :class:`ProgressEvent` values yielded by
:meth:`UpdateOrchestrator.run`. Any failure ends the run with a single
``complete`` event carrying ``error``.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import aclosing

from self_updater.changes import (
    format_size,
    parse_head_branch,
    parse_name_status,
    parse_object_size,
    parse_oneline_log,
    parse_shortstat,
)
from self_updater.commands import (
    GIT_CAT_FILE_SIZE,
    GIT_DIFF_NAME_STATUS,
    GIT_DIFF_SHORTSTAT,
    GIT_FETCH_ALL,
    GIT_LOG_ONELINE,
    GIT_PULL,
    GIT_REMOTE_SHOW,
    GIT_REMOTE_URL,
    GIT_REV_PARSE,
    GIT_VERIFY_REF,
    REMOTE,
    CommandRunner,
    render,
)
from self_updater.config import Settings
from self_updater.errors import CommandError, UpdateError
from self_updater.logging import get_logger
from self_updater.models import ChangeSummary, ProgressEvent, Stage, UpdateRequest

log = get_logger("self_updater.orchestrator")

DEFAULT_BRANCH = "main"
SHORT_SHA_LENGTH = 7

UNKNOWN_ERROR = "Unknown error occurred"


class UpdateOrchestrator:
    """Runs the update pipeline for one request."""

    def __init__(self, runner: CommandRunner, settings: Settings) -> None:
        self._runner = runner
        self._settings = settings

    async def run(self, request: UpdateRequest) -> AsyncIterator[ProgressEvent]:
        """Yield progress events until the update finishes, no-ops, or fails.

        Never raises; failures become the final event.
        """
        try:
            async with aclosing(self._pipeline(request)) as events:
                async for event in events:
                    yield event
        except UpdateError as exc:
            log.warning("update_rejected", branch=request.branch, error=str(exc))
            yield ProgressEvent(stage=Stage.COMPLETE, message="Update failed", error=str(exc))
        except Exception as exc:
            log.exception("update_failed", branch=request.branch)
            yield ProgressEvent(
                stage=Stage.COMPLETE,
                message="Update failed",
                error=str(exc) or UNKNOWN_ERROR,
            )

    async def _pipeline(self, request: UpdateRequest) -> AsyncIterator[ProgressEvent]:
        await self._verify_remote()
        branch = request.branch or await self.resolve_default_branch()
        remote_ref = f"{REMOTE}/{branch}"
        log.info("update_started", branch=branch)

        yield ProgressEvent(stage=Stage.FETCH, message="Fetching latest changes...", progress=0)
        await self._runner.run(GIT_FETCH_ALL)

        try:
            await self._runner.run(render(GIT_VERIFY_REF, ref=remote_ref))
        except CommandError as exc:
            raise UpdateError(
                f"Remote branch '{remote_ref}' not found. Please push your changes first."
            ) from exc

        current = (await self._runner.run(render(GIT_REV_PARSE, ref="HEAD"))).strip()
        remote = (await self._runner.run(render(GIT_REV_PARSE, ref=remote_ref))).strip()

        if current == remote:
            log.info("update_not_needed", branch=branch, commit=current[:SHORT_SHA_LENGTH])
            yield ProgressEvent(
                stage=Stage.COMPLETE,
                message="No updates available. You are on the latest version.",
                progress=100,
            )
            return

        summary = await self.summarize_changes(current, remote, remote_ref)
        if summary is None:
            yield ProgressEvent(
                stage=Stage.COMPLETE,
                message=(
                    f"No file changes detected between your version and {remote_ref}. "
                    "You might be on a different branch."
                ),
                progress=100,
            )
            return

        if not summary.changed_files and summary.additions == summary.deletions == 0:
            yield ProgressEvent(
                stage=Stage.COMPLETE,
                message=(
                    f"No changes detected between your version and {remote_ref}. "
                    "This might be unexpected - please check your git status."
                ),
                progress=100,
            )
            return

        yield ProgressEvent(
            stage=Stage.FETCH,
            message=f"Changes detected on {remote_ref}",
            progress=100,
            details=summary,
        )

        yield ProgressEvent(stage=Stage.PULL, message=f"Pulling changes from {branch}...", progress=0)
        await self._runner.run(render(GIT_PULL, remote=REMOTE, branch=branch))
        yield ProgressEvent(stage=Stage.PULL, message="Changes pulled successfully", progress=100)

        yield ProgressEvent(stage=Stage.INSTALL, message="Installing dependencies...", progress=0)
        await self._runner.run(self._settings.install_command)
        yield ProgressEvent(
            stage=Stage.INSTALL, message="Dependencies installed successfully", progress=100
        )

        yield ProgressEvent(stage=Stage.BUILD, message="Building application...", progress=0)
        await self._runner.run(self._settings.build_command)
        yield ProgressEvent(stage=Stage.BUILD, message="Build completed successfully", progress=100)

        log.info("update_completed", branch=branch, commit=remote[:SHORT_SHA_LENGTH])
        yield ProgressEvent(
            stage=Stage.COMPLETE,
            message="Update completed successfully! Click Restart to apply changes.",
            progress=100,
        )

    async def _verify_remote(self) -> None:
        try:
            await self._runner.run(render(GIT_REMOTE_URL, remote=REMOTE))
        except CommandError as exc:
            raise UpdateError(
                "No remote repository found. Please set up the remote repository first "
                f"by running:\ngit remote add {REMOTE} {self._settings.upstream_url}"
            ) from exc

    async def resolve_default_branch(self) -> str:
        """Ask the remote for its default branch, falling back to DEFAULT_BRANCH."""
        try:
            output = await self._runner.run(render(GIT_REMOTE_SHOW, remote=REMOTE))
        except CommandError:
            log.debug("default_branch_lookup_failed", fallback=DEFAULT_BRANCH)
            return DEFAULT_BRANCH
        return parse_head_branch(output) or DEFAULT_BRANCH

    async def summarize_changes(
        self, current: str, remote: str, remote_ref: str
    ) -> ChangeSummary | None:
        """Describe what pulling ``remote`` on top of ``current`` brings in.

        Returns None when git reports no changed paths.

        Raises:
            UpdateError: If the changed paths cannot be listed.
        """
        try:
            output = await self._runner.run(
                render(GIT_DIFF_NAME_STATUS, base=current, target=remote)
            )
        except CommandError as exc:
            log.debug("changed_files_lookup_failed", error=str(exc))
            raise UpdateError(
                f"Failed to compare changes with {remote_ref}. Are you on the correct branch?"
            ) from exc

        changes = parse_name_status(output)
        if not changes:
            return None

        total_bytes = 0
        for change in changes:
            if change.is_deleted:
                continue
            try:
                size_output = await self._runner.run(
                    render(GIT_CAT_FILE_SIZE, object=f"{remote}:{change.path}")
                )
            except CommandError:
                log.debug("file_size_lookup_failed", path=change.path)
                continue
            total_bytes += parse_object_size(size_output)

        try:
            commit_messages = parse_oneline_log(
                await self._runner.run(render(GIT_LOG_ONELINE, base=current, target=remote))
            )
        except CommandError:
            log.debug("commit_log_lookup_failed")
            commit_messages = []

        stat = None
        try:
            stat = parse_shortstat(
                await self._runner.run(render(GIT_DIFF_SHORTSTAT, base=current, target=remote))
            )
        except CommandError:
            log.debug("shortstat_lookup_failed")

        return ChangeSummary(
            changed_files=[change.label for change in changes],
            additions=stat.insertions if stat else 0,
            deletions=stat.deletions if stat else 0,
            commit_messages=commit_messages,
            total_size=format_size(total_bytes),
            current_commit=current[:SHORT_SHA_LENGTH],
            remote_commit=remote[:SHORT_SHA_LENGTH],
        )
