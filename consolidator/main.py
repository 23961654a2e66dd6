from consolidator.config.settings import Settings
from consolidator.database.connection import close_pool, init_pool
from consolidator.database.repositories.case_repository import CaseRepository
from consolidator.logging.logger import Log
from consolidator.processor.processor import build_processor
from consolidator.storage.shard_allocator import ShardAllocator
from consolidator.worker.case_runner import CaseRunner
from consolidator.worker.worker import Worker


def main() -> None:
    """Entry point: load settings -> open pool -> rebuild shard state -> run one batch pass."""
    settings = Settings()
    Log.configure(settings.log_level, settings.log_path)
    init_pool(settings)

    try:
        allocator = ShardAllocator.from_disk(settings.storage_root, settings.max_per_dir)
        case_repo = CaseRepository(settings)
        processor = build_processor(settings, allocator, case_repo)
        case_runner = CaseRunner(processor, case_repo)
        worker = Worker(case_repo, case_runner, allocator, settings)
        worker.run()
    finally:
        close_pool()


if __name__ == "__main__":
    main()
