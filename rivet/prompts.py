"""Prompt templates for the analysis, generation and regeneration turns.

These are data tables only; the orchestrator decides which one applies.
"""

from typing import Optional

from .models import AnalysisContext, AnalysisMode, PrData

COMMIT_STYLES = ('conventional', 'angular', 'simple', 'emoji')

COMMIT_STYLE_PROMPTS = {
    'conventional': (
        "Use conventional commit format: type(scope): subject. Examples: "
        "feat(auth): add OAuth login, fix(ui): resolve button alignment, "
        "docs(readme): update installation instructions."
    ),
    'angular': (
        "Use Angular commit format with detailed body. Include type(scope): subject "
        "line, then detailed body explaining what changed and why. Include breaking "
        "changes section if applicable."
    ),
    'simple': "Write a clear, concise one-line commit message that describes what changed and why.",
    'emoji': (
        "Use gitmoji format: 🎉 type: subject. Examples: ✨ feat: add OAuth login, "
        "🐛 fix: resolve button alignment, 📚 docs: update installation instructions."
    ),
}

DEFAULT_COMMIT_STYLE_PROMPT = "Create a clear, descriptive commit message."

PR_LABEL_HINT = "Use appropriate labels like: bug, feature, enhancement, documentation, refactor, etc."

COMMIT_ANALYSIS_TEMPLATE = """Analyze these staged git changes for a commit message.

Branch: {branch}
Files changed ({file_count}):
{file_lines}
{diff_section}
Summarize in 2-3 sentences:
1. Type of change (feat/fix/refactor/docs/test)
2. Main purpose
3. Key details"""

PR_ANALYSIS_TEMPLATE = """Analyze these branch changes for a pull request.

Branch: {branch}{base_line}
Files changed ({file_count}):
{file_lines}

Commits:
{commits}
{template_section}{diff_section}
Provide detailed analysis:
1. Type of changes (feat/fix/refactor/docs/test)
2. Overall purpose of this branch
3. Key implementation details
4. Any breaking changes or important notes"""

# Raw-diff variants for when per-file stats are unavailable.
LEGACY_COMMIT_ANALYSIS_TEMPLATE = """Analyze these git changes for a commit message.

Branch: {branch}
Files: {files}

Git diff:
{diff}

Summarize in 2-3 sentences: the type of change, its main purpose and key details."""

LEGACY_PR_ANALYSIS_TEMPLATE = """Analyze these branch changes for a pull request.

Branch: {branch}{base_line}
Files: {files}

Commits:
{commits}
{template_section}
Git diff:
{diff}

Provide detailed analysis: type of changes, overall purpose, key implementation
details, and any breaking changes or important notes."""

COMMIT_GENERATION_TEMPLATE = """{style}{system}

Based on this analysis of the changes:
{summary}

Generate a commit message. Return ONLY the commit message."""

COMMIT_REGENERATION_TEMPLATE = """The previous commit message was:
{previous}

The user wants this improvement: {feedback}

Based on the same analysis of changes, generate an improved commit message. Return ONLY the commit message."""

PR_JSON_FORMAT = """Return ONLY valid JSON in this exact format:
{{
  "title": "PR title here",
  "body": "{body_hint}",
  "labels": ["label1", "label2"]
}}"""

PR_BODY_HINT = "PR description here. Explain what changed and why."
PR_TEMPLATE_BODY_HINT = "filled template content"

PR_GENERATION_TEMPLATE = """{system}Based on this analysis of the changes:
{summary}

Generate PR content.{template_block}

{json_format}

{label_hint}"""

PR_TEMPLATE_BLOCK = """ following this template:

---TEMPLATE START---
{template}
---TEMPLATE END---

Fill in all sections appropriately. Keep any section headers but replace
placeholder text with actual content based on the changes."""

PR_REGENERATION_TEMPLATE = """The previous PR content was:
Title: {title}
Body: {body}
Labels: {labels}

The user wants this improvement: {feedback}

Based on the same analysis of changes, generate improved PR content.{template_section}

{json_format}"""

PR_REGENERATION_TEMPLATE_SECTION = """

Follow this template:
---TEMPLATE START---
{template}
---TEMPLATE END---

Fill in all sections appropriately."""


def commit_style_prompt(style: Optional[str]) -> str:
    """Map a configured commit style to its instruction text."""
    if style and style in COMMIT_STYLE_PROMPTS:
        return COMMIT_STYLE_PROMPTS[style]
    return DEFAULT_COMMIT_STYLE_PROMPT


def _file_lines(context: AnalysisContext) -> str:
    return "\n".join(f"• {s.format_line()}" for s in context.stats)


def _diff_section(context: AnalysisContext) -> str:
    if not context.diff or not context.diff.strip():
        return ""
    return f"\nDiff excerpt:\n{context.diff}\n"


def _base_line(context: AnalysisContext) -> str:
    return f"\nBase branch: {context.base_branch}" if context.base_branch else ""


def build_analysis_prompt(context: AnalysisContext, mode: AnalysisMode) -> str:
    """Build the analysis-turn prompt.

    The stats-based template is used whenever per-file stats exist; the
    legacy raw-diff template covers contexts that only carry diff text.
    """
    if not context.stats and context.diff:
        files = ", ".join(context.files) if context.files else "(see diff)"
        if mode == AnalysisMode.COMMIT:
            return LEGACY_COMMIT_ANALYSIS_TEMPLATE.format(
                branch=context.branch, files=files, diff=context.diff,
            )
        return LEGACY_PR_ANALYSIS_TEMPLATE.format(
            branch=context.branch,
            base_line=_base_line(context),
            files=files,
            commits=context.commits or "(none)",
            template_section=(
                f"\nPR Template:\n{context.pr_template}\n" if context.pr_template else ""
            ),
            diff=context.diff,
        )

    if mode == AnalysisMode.COMMIT:
        return COMMIT_ANALYSIS_TEMPLATE.format(
            branch=context.branch,
            file_count=len(context.stats),
            file_lines=_file_lines(context),
            diff_section=_diff_section(context),
        )

    return PR_ANALYSIS_TEMPLATE.format(
        branch=context.branch,
        base_line=_base_line(context),
        file_count=len(context.stats),
        file_lines=_file_lines(context),
        commits=context.commits or "(none)",
        template_section=(
            f"\nPR Template:\n{context.pr_template}\n" if context.pr_template else ""
        ),
        diff_section=_diff_section(context),
    )


def build_commit_prompt(summary: str, style: Optional[str] = None,
                        system_prompt: Optional[str] = None) -> str:
    return COMMIT_GENERATION_TEMPLATE.format(
        style=commit_style_prompt(style),
        system=f"\n\n{system_prompt}" if system_prompt else "",
        summary=summary,
    )


def build_commit_regeneration_prompt(previous: str, feedback: str) -> str:
    return COMMIT_REGENERATION_TEMPLATE.format(previous=previous, feedback=feedback)


def _pr_json_format(pr_template: Optional[str]) -> str:
    return PR_JSON_FORMAT.format(
        body_hint=PR_TEMPLATE_BODY_HINT if pr_template else PR_BODY_HINT
    )


def build_pr_prompt(summary: str, pr_template: Optional[str] = None,
                    system_prompt: Optional[str] = None) -> str:
    return PR_GENERATION_TEMPLATE.format(
        system=f"{system_prompt}\n\n" if system_prompt else "",
        summary=summary,
        template_block=PR_TEMPLATE_BLOCK.format(template=pr_template) if pr_template else "",
        json_format=_pr_json_format(pr_template),
        label_hint=PR_LABEL_HINT,
    )


def build_pr_regeneration_prompt(previous: PrData, feedback: str,
                                 pr_template: Optional[str] = None) -> str:
    return PR_REGENERATION_TEMPLATE.format(
        title=previous.title,
        body=previous.body,
        labels=", ".join(previous.labels) if previous.labels else "none",
        feedback=feedback,
        template_section=(
            PR_REGENERATION_TEMPLATE_SECTION.format(template=pr_template)
            if pr_template else ""
        ),
        json_format=_pr_json_format(pr_template),
    )
