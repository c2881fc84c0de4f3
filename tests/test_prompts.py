from jester.core.prompts import build_fix_prompt


def test_inputs_are_inserted_verbatim_in_order():
    source = "function add(a, b) { return a - b; }"
    tests = "expect(add(2, 3)).toBe(5);"
    log = 'Expected: 5\nReceived: -1 "quoted" {braces}'
    prompt = build_fix_prompt(source, tests, log)

    assert source in prompt
    assert tests in prompt
    assert log in prompt
    assert prompt.index("--- SOURCE CODE ---") < prompt.index(source)
    assert prompt.index(source) < prompt.index("--- TEST SUITE ---") < prompt.index(tests)
    assert prompt.index(tests) < prompt.index("--- ERROR LOG ---") < prompt.index(log)
    assert prompt.rstrip().endswith("--- YOUR RESPONSE ---")


def test_prompt_asks_for_final_code_block():
    prompt = build_fix_prompt("", "", "")
    assert "COMPLETE fixed source code block" in prompt
    assert "Jester" in prompt
