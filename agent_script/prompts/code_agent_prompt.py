# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Default prompt templates of the code agent.

All templates are jinja2 strings rendered with: ``udfs`` (the agent's UDF
objects), ``managed_agents``, ``task``, ``description``,
``authorized_imports`` and the per-template variables noted below.
"""
from dataclasses import dataclass

from .parts import CODE_AGENT_ROLE_PROMPT_PART
from .builder import (
    CodeAgentRunExample,
    CodeAgentRunExampleStep,
    build_code_agent_rules_prompt,
    build_examples_section_prompt,
)
from ..utils.formatting import remove_leading_indentation


@dataclass
class PlanningPrompt:
    initial_facts: str
    initial_plan: str  # answer_facts
    update_facts_pre_messages: str
    update_facts_post_messages: str
    update_plan_pre_messages: str
    update_plan_post_messages: str  # facts_update, remaining_steps


@dataclass
class ManagedAgentPrompt:
    task: str  # name, task
    report: str  # name, final_answer


@dataclass
class FinalAnswerPrompt:
    pre_messages: str
    post_messages: str  # task


@dataclass
class CodeAgentPrompt:
    system_prompt: str
    planning: PlanningPrompt
    managed_agent: ManagedAgentPrompt
    final_answer: FinalAnswerPrompt


CODE_AGENT_EXAMPLES = [
    CodeAgentRunExample(
        task="Generate an image of the oldest person in this document.",
        steps=[
            CodeAgentRunExampleStep(
                thought="I will proceed step by step and use the following UDFs: `documentQa` to find the oldest person in the document, then `imageGenerator` to generate an image according to the answer.",
                code='answer = await documentQa({"document": document, "question": "Who is the oldest person mentioned?"})',
                result='answer = "The oldest person in the document is John Doe, a 55 year old lumberjack living in Newfoundland."',
            ),
            CodeAgentRunExampleStep(
                thought="I will now generate an image showcasing the oldest person.",
                code='image = await imageGenerator({"prompt": "A portrait of John Doe, a 55-year-old man living in Canada."})\nawait finalAnswer({"answer": image})',
                result='image = "https://example.com/image.png"',
            ),
        ],
    ),
    CodeAgentRunExample(
        task="Find the best selling top 5 books in 2024, give me the title, author",
        steps=[
            CodeAgentRunExampleStep(
                thought="I will use the UDF `webSearch` to get the best selling books in 2024.",
                code='book_search_results = await webSearch({"query": "best selling books in 2024"})',
                result=remove_leading_indentation(
                    """
                    // webSearch ->
                    book_search_results = [
                      {
                        "title": "The Great Gatsby",
                        "link": "https://www.amazon.com/Great-Gatsby-F-Scott-Fitzgerald/dp/1451673316"
                      },
                      ...
                    ]
                    """
                ).strip(),
            ),
            CodeAgentRunExampleStep(
                thought="I have the result from the web search stored in the variable `book_search_results`. Now I need to visit each of the webpages from the results and extract the title, author",
                code='webpage_data_1 = await getWebpageData({"url": book_search_results[0]["link"]})',
                result=remove_leading_indentation(
                    """
                    // getWebpageData ->
                    webpage_data_1 = {
                      "title": "The Great Gatsby",
                      "author": "F. Scott Fitzgerald"
                    }
                    """
                ).strip(),
            ),
        ],
    ),
]

UDF_SIGNATURES_BLOCK = """```
{% for udf in udfs -%}
{{ udf.get_signature() }}

{% endfor -%}
```"""

MANAGED_AGENTS_BLOCK = """{% if managed_agents %}
You can also give tasks to team members.
Calling a team member works the same as for calling a UDF: the only argument you can give in the call is 'task'.
Given that this team member is a real human, you should be very verbose in your task, it should be a long string providing information as detailed as necessary.
Here is a list of the team members that you can call:
{% for agent in managed_agents -%}
- {{ agent.name }}: {{ agent.description }}
{% endfor -%}
{% endif %}"""

SYSTEM_PROMPT = f"""{CODE_AGENT_ROLE_PROMPT_PART}

In the end you have to call the `finalAnswer` UDF with the final answer as the argument.

{build_examples_section_prompt(CODE_AGENT_EXAMPLES)}
Above examples were using notional UDFs that might not exist for you. On top of performing computations in the Python code snippets that you create, you only have access to these UDFs (in addition to any built-in functions):
{UDF_SIGNATURES_BLOCK}
{MANAGED_AGENTS_BLOCK}

{build_code_agent_rules_prompt()}
{{{{ description }}}}

Now Begin! If you solve the task correctly, you will receive a reward of $1,000,000."""

INITIAL_FACTS = """Below I will present you a task.

You will now build a comprehensive preparatory survey of which facts we have at our disposal and which ones we still need.
To do so, you will have to read the task and identify things that must be discovered in order to successfully complete it.
Don't make any assumptions. For each item, provide a thorough reasoning. Here is how you will structure this survey:

---
### 1. Facts given in the task
List here the specific facts given in the task that could help you (there might be nothing here).

### 2. Facts to look up
List here any facts that we may need to look up.
Also list where to find each of these, for instance a website, a file... - maybe the task contains some sources that you should re-use here.

### 3. Facts to derive
List here anything that we want to derive from the above by logical reasoning, for instance computation or simulation.

Keep in mind that "facts" will typically be specific names, dates, values, etc. Your answer should use the below headings:
### 1. Facts given in the task
### 2. Facts to look up
### 3. Facts to derive
Do not add anything else."""

INITIAL_PLAN = f"""You are a world expert at making efficient plans to solve any task using a set of carefully crafted User Defined Functions (UDFs).

Now for the given task, develop a step-by-step high-level plan taking into account the above inputs and list of facts.
This plan should involve individual tasks based on the available UDFs, that if executed correctly will yield the correct answer.
Do not skip steps, do not add any superfluous steps. Only write the high-level plan, DO NOT DETAIL INDIVIDUAL UDF CALLS.
After writing the final step of the plan, write the '\\n<end_plan>' tag and stop there.

Here is your task:

Task:
```
{{{{ task }}}}
```
You can leverage these UDFs:
{UDF_SIGNATURES_BLOCK}
{MANAGED_AGENTS_BLOCK}
List of facts that you know:
```
{{{{ answer_facts }}}}
```

Now begin! Write your plan below."""

UPDATE_FACTS_PRE_MESSAGES = """You are a world expert at gathering known and unknown facts based on a conversation.
Below you will find a task, and a history of attempts made to solve the task. You will have to produce a list of these:
### 1. Facts given in the task
### 2. Facts that we have learned
### 3. Facts still to look up
### 4. Facts still to derive
Find the task and history below:"""

UPDATE_FACTS_POST_MESSAGES = """Earlier we've built a list of facts.
But since in your previous steps you may have learned useful new facts or invalidated some false ones.
Please update your list of facts based on the previous history, and provide these headings:
### 1. Facts given in the task
### 2. Facts that we have learned
### 3. Facts still to look up
### 4. Facts still to derive

Now write your new list of facts below."""

UPDATE_PLAN_PRE_MESSAGES = """You are a world expert at making efficient plans to solve any task using a set of carefully crafted User Defined Functions (UDFs).

You have been given a task:
```
{{ task }}
```

Find below the record of what has been tried so far to solve it. Then you will be asked to make an updated plan to solve the task.
If the previous tries so far have met some success, you can make an updated plan based on these actions.
If you are stalled, you can make a completely new plan starting from scratch."""

UPDATE_PLAN_POST_MESSAGES = f"""You're still working towards solving this task:
```
{{{{ task }}}}
```

You can leverage these UDFs:
{UDF_SIGNATURES_BLOCK}
{MANAGED_AGENTS_BLOCK}
Here is the up to date list of facts that you know:
```
{{{{ facts_update }}}}
```

Now for the given task, develop a step-by-step high-level plan taking into account the above inputs and list of facts.
This plan should involve individual tasks based on the available UDFs, that if executed correctly will yield the correct answer.
Beware that you have {{{{ remaining_steps }}}} steps remaining.
Do not skip steps, do not add any superfluous steps. Only write the high-level plan, DO NOT DETAIL INDIVIDUAL UDF CALLS.
After writing the final step of the plan, write the '\\n<end_plan>' tag and stop there.

Now write your new plan below."""

MANAGED_AGENT_TASK = remove_leading_indentation(
    """
    You're a helpful agent named '{{ name }}'.
    You have been submitted this task by your manager.
    ---
    Task:
    {{ task }}
    ---
    You're helping your manager solve a wider task: so make sure to not provide a one-line answer, but give as much information as possible to give them a clear understanding of the answer.

    Your finalAnswer WILL HAVE to contain these parts:
    ### 1. Task outcome (short version):
    ### 2. Task outcome (extremely detailed version):
    ### 3. Additional context (if relevant):

    Put all these in your finalAnswer UDF, everything that you do not pass as an argument to finalAnswer will be lost.
    And even if your task resolution is not successful, please return as much context as possible, so that your manager can act upon this feedback.
    """
).strip()

MANAGED_AGENT_REPORT = """Here is the final answer from your managed agent '{{ name }}':
{{ final_answer }}"""

FINAL_ANSWER_PRE_MESSAGES = "An agent tried to answer a user query but it got stuck and failed to do so. You are tasked with providing an answer instead. Here is the agent's memory:"

FINAL_ANSWER_POST_MESSAGES = """Based on the above, please provide an answer to the following user request:
{{ task }}"""


def default_code_agent_prompt() -> CodeAgentPrompt:
    return CodeAgentPrompt(
        system_prompt=SYSTEM_PROMPT,
        planning=PlanningPrompt(
            initial_facts=INITIAL_FACTS,
            initial_plan=INITIAL_PLAN,
            update_facts_pre_messages=UPDATE_FACTS_PRE_MESSAGES,
            update_facts_post_messages=UPDATE_FACTS_POST_MESSAGES,
            update_plan_pre_messages=UPDATE_PLAN_PRE_MESSAGES,
            update_plan_post_messages=UPDATE_PLAN_POST_MESSAGES,
        ),
        managed_agent=ManagedAgentPrompt(
            task=MANAGED_AGENT_TASK,
            report=MANAGED_AGENT_REPORT,
        ),
        final_answer=FinalAnswerPrompt(
            pre_messages=FINAL_ANSWER_PRE_MESSAGES,
            post_messages=FINAL_ANSWER_POST_MESSAGES,
        ),
    )
