# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
# The few-shot examples and rules in the system prompt tell the model to end
# each code block with CODE_STOP_TOKEN and each plan with PLAN_STOP_TOKEN.

CODE_STOP_TOKEN = "<end_code>"
OBSERVATION_STOP_TOKEN = "Observation:"
PLAN_STOP_TOKEN = "<end_plan>"

CODE_STOP_SEQUENCES = [CODE_STOP_TOKEN, OBSERVATION_STOP_TOKEN]
