"""
Prompt templates for each process kind.

Each template receives the note's extracted plain text as ``{note}``.
"""

from typing import Dict, List

from ainotes.models.item import ProcessInfo, ProcessKind

PROCESS_PROMPTS: Dict[ProcessKind, str] = {
    ProcessKind.RESEARCH: (
        "You are a research assistant helping a user understand a topic better.\n\n"
        "The user has saved this note:\n\n"
        "{note}\n\n"
        "Research this topic and write a comprehensive summary. Include:\n\n"
        "1. **Key Concepts**: Explain the main ideas in simple terms\n"
        "2. **Important Context**: Provide relevant background information\n"
        "3. **Recent Developments**: Mention recent advancements or changes, if any\n"
        "4. **Related Topics**: Suggest 2-3 related areas worth exploring\n"
        "5. **Reliable Sources**: List 3-5 credible sources for further reading\n\n"
        "Format your response as markdown with headers and bullet points.\n"
        "Keep it informative but concise (300-500 words)."
    ),
    ProcessKind.SUMMARIZE: (
        "You are a summarization expert.\n\n"
        "The user has provided this content to summarize:\n\n"
        "{note}\n\n"
        "Write a concise summary that:\n"
        "- Captures the main points and key takeaways\n"
        "- Uses clear, accessible language\n"
        "- Keeps the original intent and important details\n"
        "- Is structured as bullet points or short paragraphs\n\n"
        "Aim for 2-3 paragraphs or 5-7 bullet points at most."
    ),
    ProcessKind.EXPAND: (
        "You are a creative thinking assistant.\n\n"
        "The user wrote this brief note:\n\n"
        "{note}\n\n"
        "Expand on the idea by providing:\n\n"
        "1. **Deeper Explanation**: Elaborate on the concept in more detail\n"
        "2. **Examples & Use Cases**: Give concrete examples or scenarios\n"
        "3. **Different Perspectives**: Consider alternative viewpoints or approaches\n"
        "4. **Implications**: Discuss potential outcomes or consequences\n"
        "5. **Questions to Consider**: Pose 3-5 thought-provoking questions\n\n"
        "Use markdown headers and lists. Aim for 400-600 words."
    ),
    ProcessKind.ACTIONPLAN: (
        "You are a productivity coach helping to turn ideas into action.\n\n"
        "The user has this note:\n\n"
        "{note}\n\n"
        "Write a practical, actionable plan that includes:\n\n"
        "1. **Goal Clarification**: State what the user wants to achieve\n"
        "2. **Action Steps**: 5-8 specific, concrete steps in order, each with an "
        "estimated time or effort (e.g. \"30 min\", \"2 hours\", \"1 week\")\n"
        "3. **Prerequisites**: Required resources, skills, or dependencies\n"
        "4. **Success Criteria**: What \"done\" looks like\n"
        "5. **Potential Obstacles**: 2-3 challenges and how to overcome them\n\n"
        "Format as markdown with numbered lists and clear sections. "
        "Be specific and practical."
    ),
}

PROCESS_CATALOG: List[ProcessInfo] = [
    ProcessInfo(
        process_kind=ProcessKind.RESEARCH,
        name="Research & Expand",
        description="Comprehensive research on the topic with key concepts, context, and sources",
    ),
    ProcessInfo(
        process_kind=ProcessKind.SUMMARIZE,
        name="Summarize",
        description="A concise summary of the main points and key takeaways",
    ),
    ProcessInfo(
        process_kind=ProcessKind.EXPAND,
        name="Expand Ideas",
        description="Elaborates the idea with examples, perspectives, and implications",
    ),
    ProcessInfo(
        process_kind=ProcessKind.ACTIONPLAN,
        name="Action Plan",
        description="Turns the note into a practical plan with specific steps",
    ),
]


def build_prompt(process_kind: ProcessKind, note_text: str) -> str:
    """Fill the template for ``process_kind`` with the note text."""
    return PROCESS_PROMPTS[process_kind].replace("{note}", note_text)
