"""Save a JSON document command."""

from collections.abc import Iterator

from ..StageResult import StageResult
from . import CollectionSaveOutput


def cmd_save(collection: str, document: str) -> StageResult:
    """Save (upsert) a JSON document into ``collection``.

    Args:
        collection: Collection name
        document: JSON or mongo shell document text; a missing ``_id`` is generated
    """

    def do_work(result_obj: StageResult) -> Iterator[tuple[float, str]]:
        from ..config.DocRepoConfig import DocRepoConfig
        from ._open_repository import _open_repository

        yield (0.2, "Loading configuration...")
        try:
            config = DocRepoConfig.load()
            yield (0.6, "Saving document...")
            with _open_repository(config, collection) as repository:
                saved = repository.save_from_json(document)
                error = repository.last_error_message
        except Exception as e:
            saved, error = None, str(e)

        yield (1.0, "Complete")
        if saved is None:
            result_obj.result = f"Save failed: {error}"
            result_obj.output = CollectionSaveOutput(
                errors=[error], collection=collection, id="", ok=False, message=error
            ).model_dump(mode="python")
            result_obj.success = False
            return

        result_obj.result = f"Saved {saved.id} to {collection}"
        result_obj.output = CollectionSaveOutput(collection=collection, **saved.to_dict()).model_dump(mode="python")
        result_obj.success = True

    return StageResult(
        announce=f"Saving document to {collection}...",
        progress_callback=do_work,
    )
