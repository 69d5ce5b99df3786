import logging
from typing import Callable, Optional

from core.exceptions import PatchingError
from core.models.config import RunConfig
from core.models.image import ImageHandle
from core.models.workflow import ServicingResult
from core.services.content_resolver import ContentResolver
from core.services.image_servicing_service import ImageServicingService
from core.services.precondition_service import PreconditionService
from core.services.update_query_service import UpdateQueryService


def prompt_confirmation(question: str) -> bool:
    """Ask the operator on the console; only y/yes counts as consent."""
    answer = input(f"{question} [y/N] ")
    return answer.strip().lower() in ["y", "yes"]


class WorkflowOrchestrator:
    """Runs one offline patching pass from preconditions to unmount."""

    def __init__(
        self,
        config: RunConfig,
        precondition_service: PreconditionService,
        update_query_service: UpdateQueryService,
        content_resolver: ContentResolver,
        image_servicing_service: ImageServicingService,
        confirm: Callable[[str], bool] = prompt_confirmation,
    ):
        self.config = config
        self.precondition_service = precondition_service
        self.update_query_service = update_query_service
        self.content_resolver = content_resolver
        self.image_servicing_service = image_servicing_service
        self.confirm = confirm
        self.logger = logging.getLogger(__name__)

    def _handle_error(self, message: str, error: Exception) -> str:
        """Centralized error handling."""
        error_msg = f"{message}: {str(error)}"
        self.logger.critical(error_msg)
        return error_msg

    async def run(self) -> ServicingResult:
        """Run the complete offline patching workflow.

        Raises:
            PatchingError: On any fatal condition; the image is unmounted
                first if it had been mounted
        """
        result = ServicingResult()
        result.mark_started()
        self.logger.info(f"Starting offline patching run {result.run_id}")

        try:
            self.precondition_service.check(self.config)

            await self.update_query_service.connect()
            scope = await self.update_query_service.build_scope(self.config.target_group)
            updates = await self.update_query_service.get_updates(scope)
            result.updates_found = len(updates)

            installables = self.content_resolver.resolve(updates)
            result.packages_resolved = len(installables)

            handle = ImageHandle(
                image_path=self.config.image_path,
                mount_dir=self.config.mount_dir,
                index=self.config.image_index,
            )
            await self.image_servicing_service.mount(handle)

            try:
                result.confirmed = self._confirm_apply(len(installables))
                if result.confirmed:
                    result.package_results = await self.image_servicing_service.apply_packages(
                        handle, installables
                    )
                else:
                    self.logger.warning("Update installation declined by operator")
            finally:
                finalized = await self.image_servicing_service.finalize(
                    handle, self.config.discard
                )
                result.committed = finalized and not self.config.discard

        except PatchingError as e:
            result.mark_failed(self._handle_error("Offline patching failed", e))
            raise

        result.mark_completed()
        self._log_summary(result)
        return result

    def _confirm_apply(self, package_count: int) -> bool:
        if not self.config.confirm:
            return True
        return self.confirm(
            f"Install up to {package_count} packages into {self.config.image_path}?"
        )

    def _log_summary(self, result: ServicingResult) -> None:
        self.logger.info(
            f"Run {result.run_id} completed in {result.duration}: "
            f"{result.updates_found} updates, {result.packages_resolved} packages resolved, "
            f"{result.applied_count} installed, {result.failed_count} failed"
        )
        for applicability, count in result.skipped_counts.items():
            self.logger.info(f"Skipped ({applicability.value}): {count}")
        if result.failed_count:
            self.logger.warning(
                f"{result.failed_count} packages failed to install, see {self.config.log_file}"
            )
