import asyncio
import random

from dotenv import load_dotenv

from task_orchestrator import FunctionExecutor, TaskInput, TaskOrchestrator
from task_orchestrator.data import write_results_to_csv
from task_orchestrator.utils import setup_logging


async def simulated_work(task_id: int) -> None:
    # Stand-in for a real network call: short random delay, every 7th id fails.
    await asyncio.sleep(random.uniform(0.01, 0.2))
    if task_id % 7 == 0:
        raise RuntimeError(f"simulated failure for task {task_id}")


async def main() -> None:
    # Load TASK_ORCHESTRATOR_* settings from .env if present
    load_dotenv()
    setup_logging()

    tasks = [TaskInput(task_id=i, task_type="process_data") for i in range(1, 51)]
    # A duplicate id: the report keeps whichever result is collected last.
    tasks.append(TaskInput(task_id=1, task_type="process_data"))

    print("▶ Running 51 simulated tasks...")
    async with TaskOrchestrator(executor=FunctionExecutor(simulated_work)) as orchestrator:
        batch = await orchestrator.run_batch(tasks)

    print(f"Strategy: {batch.strategy}")
    print(f"Completed: {batch.completed_count}, Failed: {batch.failed_count}\n")
    print(write_results_to_csv(batch.results))


if __name__ == "__main__":
    asyncio.run(main())
