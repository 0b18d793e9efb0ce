"""List collections command."""

from collections.abc import Iterator

from ..StageResult import StageResult
from . import CollectionListOutput


def cmd_list() -> StageResult:
    """List collections in the configured database.

    Returns:
        StageResult with the collection names
    """

    def do_work(result_obj: StageResult) -> Iterator[tuple[float, str]]:
        from ..config.DocRepoConfig import DocRepoConfig
        from ..database.Context import Context

        yield (0.2, "Loading configuration...")
        try:
            config = DocRepoConfig.load()
        except Exception as e:
            yield (1.0, "Complete")
            result_obj.result = str(e)
            result_obj.output = CollectionListOutput(errors=[str(e)], database="", collections=[]).model_dump(
                mode="python"
            )
            result_obj.success = False
            return

        yield (0.5, "Querying database...")
        try:
            with Context(config.database) as context:
                names = context.list_collection_names()
        except Exception as e:
            yield (1.0, "Complete")
            result_obj.result = f"Failed to list collections: {e}"
            result_obj.output = CollectionListOutput(
                errors=[str(e)], database=config.database.name, collections=[]
            ).model_dump(mode="python")
            result_obj.success = False
            return

        yield (1.0, "Complete")
        result_obj.result = f"Found {len(names)} collection(s)"
        result_obj.output = CollectionListOutput(database=config.database.name, collections=names).model_dump(
            mode="python"
        )
        result_obj.success = True

    return StageResult(
        announce="Listing collections...",
        progress_callback=do_work,
    )
