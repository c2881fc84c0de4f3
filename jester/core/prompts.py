"""
Prompt template for test-driven code repair.
"""

FIX_PROMPT_TEMPLATE = """
You are an expert software engineer and test specialist (Jester).
Your goal is to fix the source code so that it passes the provided tests.

CONTEXT:
1.  **Source Code**: The current implementation (potentially buggy).
2.  **Test Suite**: The tests that define the expected behavior.
3.  **Error Log**: The output from the test runner showing failures.

INSTRUCTIONS:
- Analyze the error log to understand why the test failed.
- Modify the Source Code to resolve the issues.
- Do NOT modify the Test Suite unless the test itself is logically flawed (rare).
- Provide a brief explanation of the fix, followed by the COMPLETE fixed source code block.
- Wrap the code in markdown code blocks, e.g., ```javascript ... ```.

--- SOURCE CODE ---
{source}

--- TEST SUITE ---
{tests}

--- ERROR LOG ---
{error_log}

--- YOUR RESPONSE ---
"""


def build_fix_prompt(source: str, tests: str, error_log: str) -> str:
    """
    Fill the repair template.

    The three texts go in verbatim; the transport encodes the whole
    prompt as one JSON string, so no escaping is needed here.
    """
    return FIX_PROMPT_TEMPLATE.format(
        source=source,
        tests=tests,
        error_log=error_log,
    )
