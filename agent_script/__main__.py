# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Main entrypoint when running the code agent with `python -m agent_script`.
"""

import json
import logging
import asyncio
import argparse

from pathlib import Path

from .agents import AgentLogger, CodeAgent
from .config import AgentScriptConfig, load_config
from .llm import ChatModel, get_total_usage, llm_call_counter
from .sandbox import Sandbox
from .types.common import LogLevel
from .udf import FinalAnswerUdf, NotebookWriteUdf, SaveDataUdf, ThinkUdf

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    logging.captureWarnings(True)
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(levelname)s - %(filename)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def setup_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="agent_script")

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Solve a task with a code agent")
    run_parser.add_argument("task", nargs="?", default=None, help="The task to solve")
    run_parser.add_argument(
        "--task-file",
        type=str,
        default=None,
        help="A file path to a file containing the task; this is useful for longer tasks",
    )
    run_parser.add_argument(
        "--max-steps", type=int, default=None, help="Number of action steps before giving up"
    )
    run_parser.add_argument(
        "--planning-interval",
        type=int,
        default=None,
        help="Re-plan before every n-th step",
    )
    run_parser.add_argument("--provider", type=str, default=None, help="Model provider name")
    run_parser.add_argument("--model", type=str, default=None, help="Model name")
    run_parser.add_argument(
        "--env-file", type=str, default=None, help="A .env file to load configuration from"
    )
    run_parser.add_argument(
        "--verbose", action="store_true", help="Log model inputs and debug output"
    )
    run_parser.add_argument(
        "--replay", action="store_true", help="Replay the agent's memory once the run ends"
    )

    return parser


def build_agent(settings: AgentScriptConfig, verbose: bool = False) -> CodeAgent:
    model = ChatModel(
        provider=settings.provider,
        model=settings.model,
        api_key=settings.api_key,
        base_url=settings.base_url,
    )
    return CodeAgent(
        name="Code Agent",
        description="A general purpose agent solving tasks by writing Python code.",
        udfs=[FinalAnswerUdf(), ThinkUdf(), NotebookWriteUdf(), SaveDataUdf()],
        max_steps=settings.max_steps,
        model=model,
        sandbox=Sandbox(settings.call_result_max_length),
        planning_interval=settings.planning_interval,
        logger=AgentLogger(LogLevel.DEBUG if verbose else LogLevel.INFO),
        max_output_length=settings.max_output_length,
    )


async def run_task(task: str, settings: AgentScriptConfig, verbose: bool = False, replay: bool = False):
    agent = build_agent(settings, verbose=verbose)

    answer = await agent.run(task)
    if answer is None:
        logger.info("No final answer within the step budget, asking for one from memory")
        answer = await agent.provide_final_answer(task)

    if replay:
        agent.memory.replay(agent.logger, detailed=verbose)

    usage = get_total_usage()
    logger.info(f"{llm_call_counter.get_count()} model calls, {usage}")

    print(answer if isinstance(answer, str) else json.dumps(answer, indent=2, default=str))
    return answer


async def main(argv: list[str] | None = None):
    parser = setup_parser()
    args = parser.parse_args(argv)

    settings = load_config(args.env_file)
    if args.provider:
        settings.provider = args.provider
    if args.model:
        settings.model = args.model
    if args.max_steps is not None:
        settings.max_steps = args.max_steps
    if args.planning_interval is not None:
        settings.planning_interval = args.planning_interval

    setup_logging("DEBUG" if args.verbose else settings.log_level)

    if args.command == "run":
        if args.task_file:
            task = Path(args.task_file).read_text()
        elif args.task:
            task = args.task
        else:
            parser.error("a task or --task-file is required")
        await run_task(task, settings, verbose=args.verbose, replay=args.replay)


def cli():
    asyncio.run(main())


if __name__ == "__main__":
    cli()
