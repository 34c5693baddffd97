"""Prompt builders for the four code tasks.

Each builder returns one instruction string that is sent to the provider as-is.
User code and task text are interpolated verbatim; no escaping is applied.
"""

from __future__ import annotations

DEFAULT_LANGUAGE = "javascript"
DEFAULT_COMPLEXITY = "intermediate"
DEFAULT_TARGET_LANGUAGE = "python"


def build_generate_prompt(
    task: str,
    language: str = DEFAULT_LANGUAGE,
    complexity: str = DEFAULT_COMPLEXITY,
) -> str:
    """Ask for a single, ready-to-paste code block and nothing else."""

    return (
        "You are a code generator that produces ONLY code, nothing extra such as usage examples "
        "or excessive error handling.\n"
        "This response will be pasted directly into a code editor, so it must run without any "
        "modifications and be user friendly.\n"
        "Code should be written so that it is easy to understand and maintain.\n"
        "You will be given a task to generate code in a specific programming language with a "
        "certain complexity level.\n"
        "You will only return the code in a code block with the appropriate syntax for the "
        "specified language.\n"
        "Do not include any explanations, comments, or additional text outside of the code block.\n"
        "Code should be proper and clean, and should follow best practices for the specified language.\n\n"
        f"Task: {task}\n\n"
        "Requirements:\n"
        f"- Language: {language}\n"
        f"- Complexity: {complexity}\n"
        "- Include only essential comments that explain complex logic\n"
        f"- Follow best practices for {language}\n"
        "- Make the code clean and concise\n"
        "- Do NOT include usage examples\n"
        "- Do NOT include explanatory text outside the code\n"
        "- Do NOT include console.log or print statements unless specifically requested\n"
        "- Do NOT include commented out code\n"
        "- Do NOT include any text outside of the code block\n\n"
        "Your entire response should be ONLY a code block with the appropriate syntax, nothing else.\n"
    )


def build_explain_prompt(code: str) -> str:
    return f"Explain this code in clear, concise terms:\n\n{code}"


def build_translate_prompt(
    code: str,
    source_language: str = DEFAULT_LANGUAGE,
    target_language: str = DEFAULT_TARGET_LANGUAGE,
) -> str:
    """Ask for a functionality-preserving translation as one code block.

    The target language's conventions are requested explicitly so the output
    reads as idiomatic code rather than a line-by-line port.
    """

    return (
        f"Translate the following code from {source_language} to {target_language}.\n"
        f"Maintain the same functionality and logic while following {target_language} "
        "conventions and best practices.\n"
        f"Return only the translated code in a code block with the appropriate syntax for {target_language}.\n"
        "Do not include any explanations or additional text outside the code block.\n\n"
        f"Source Code ({source_language}):\n"
        f"{code}\n\n"
        f"Translate to {target_language}:\n"
    )


def build_optimize_prompt(code: str, language: str = DEFAULT_LANGUAGE) -> str:
    """Ask for optimized code plus a short explanation.

    The reply mixes prose and code, so callers return it without extraction.
    """

    return (
        f"Analyze and optimize the following {language} code. "
        "Provide specific optimization suggestions including:\n"
        "1. Performance improvements\n"
        "2. Code readability enhancements\n"
        "3. Best practices recommendations\n"
        "4. Security considerations (if applicable)\n"
        "5. Memory usage optimizations\n\n"
        "Provide both the optimized code and a brief explanation of the changes made.\n\n"
        "Original Code:\n"
        f"{code}\n\n"
        "Please provide:\n"
        "1. The optimized code in a code block\n"
        "2. A brief explanation of the optimizations made\n"
    )
