"""Prompt builders shared across services."""


def build_summary_prompt(content: str) -> str:
    return (
        "Summarize the following text in a concise paragraph:\n\n"
        f"{content}\n\n"
        "Provide only the summary paragraph without any introductory words or explanations."
    )
