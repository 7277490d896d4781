"""Prompt templates for knowledge-entry classification."""
from typing import Dict, List


class ClassifierPrompt:
    """Prompt template for classifying one text chunk into a knowledge entry."""

    ENTRY_TYPES: List[str] = [
        "concept",
        "principle",
        "quote",
        "example",
        "procedure",
        "question",
        "connection",
        "note",
        "reference",
        "template",
        "unknown",
    ]

    METADATA_SCHEMAS: Dict[str, str] = {
        "concept": '{ "term": "", "definition": "", "field": "", "examples": [], "related": [] }',
        "principle": '{ "name": "", "statement": "", "domain": "", "conditions": "", "examples": [] }',
        "quote": '{ "text": "", "author": "", "source": "", "context": "" }',
        "example": '{ "title": "", "description": "", "domain": "", "demonstrates": "" }',
        "procedure": '{ "name": "", "steps": [], "prerequisites": "", "notes": "" }',
        "question": '{ "question": "", "domain": "", "context": "", "possible_answer": "" }',
        "connection": '{ "idea_a": "", "idea_b": "", "relationship": "", "insight": "" }',
        "note": '{ "topic": "", "observation": "" }',
        "reference": '{ "title": "", "author": "", "source_type": "", "url": "", "notes": "" }',
        "template/unknown": "{}",
    }

    SYSTEM_MESSAGE = """You are a knowledge classifier. You convert text chunks into structured JSON for a study system.

=== TYPE DEFINITIONS ===
concept: Definitions, terms, ideas, topics to learn. Study guide topics count as concepts.
principle: Laws, rules, heuristics ("Newton's Law", "DRY principle", "80/20 rule")
quote: Memorable statements WITH clear attribution to a person
example: Concrete instances, case studies, worked problems, code snippets
procedure: Step-by-step methods, algorithms, recipes (must have sequential steps)
question: Problems to solve, thought experiments, "how/why" prompts
connection: Explicit analogies linking two ideas ("X is like Y because...")
note: Freeform observations, reflections, personal thoughts
reference: Pointers to external sources (books, papers, URLs)
template: ONLY empty structural elements (blank headers, page numbers, dividers with NO content)
unknown: Genuinely unclassifiable content

=== TIEBREAKER RULES (when content fits multiple types) ===
1. If it has explicit steps in order -> procedure (not concept)
2. If it quotes someone with attribution -> quote (not note)
3. If it's a list of topics to study -> concept (not template, not note)
4. If it asks a question -> question (not concept)
5. If it links two ideas explicitly -> connection (not note)
6. When still ambiguous -> prefer concept over note, note over unknown

=== TEMPLATE vs CONTENT (CRITICAL) ===
template = ONLY pure structure with ZERO educational value
- "Chapter 3" with nothing else = template
- "Chapter 3: Photosynthesis" = concept (has a topic!)
- Bullet points listing study topics = concept (NOT template)
- Exam outlines, study guides = concept or note (NOT template)

=== CONFIDENCE SCORING ===
0.9-1.0: Type is unambiguous, all metadata fields populated from source
0.7-0.8: Type is clear, some metadata inferred but reasonable
0.5-0.6: Type required judgment call, limited metadata available
0.3-0.4: Borderline classification, sparse content
0.1-0.2: Best guess, content is fragmentary or unclear

=== WHEN IN DOUBT ===
- Missing field? Use "" for strings, [] for arrays. Never invent.
- Not sure if template? If ANY educational content exists, it's NOT a template.
- Can't determine type? Use "unknown" with confidence 0.2
- Content seems like multiple entries? Classify the DOMINANT type only."""

    EXAMPLES = r"""=== EXAMPLE 1 ===
Input: "Mitochondria are the powerhouse of the cell. They produce ATP through cellular respiration."
Output:
{"type":"concept","title":"Mitochondria","content":"Mitochondria are the powerhouse of the cell. They produce ATP through cellular respiration.","tags":["biology","cell biology"],"metadata":{"term":"Mitochondria","definition":"The powerhouse of the cell that produces ATP through cellular respiration","field":"biology","examples":[],"related":["ATP","cellular respiration"]},"meta":{"confidence":0.95,"detected_sections":[],"is_template":false}}

=== EXAMPLE 2 ===
Input: "Study Guide - Chapter 5\n• Supply and demand\n• Market equilibrium\n• Price elasticity"
Output:
{"type":"concept","title":"Chapter 5 Study Topics","content":"Study Guide - Chapter 5: Supply and demand, Market equilibrium, Price elasticity","tags":["economics","study guide"],"metadata":{"term":"Economics Chapter 5","definition":"Key topics: supply and demand, market equilibrium, price elasticity","field":"economics","examples":[],"related":["supply","demand","equilibrium","elasticity"]},"meta":{"confidence":0.85,"detected_sections":["Supply and demand","Market equilibrium","Price elasticity"],"is_template":false}}

=== EXAMPLE 3 ===
Input: "Page 42"
Output:
{"type":"template","title":"","content":"","tags":[],"metadata":{},"meta":{"confidence":0.95,"detected_sections":[],"is_template":true}}"""

    JSON_RULES = r"""=== JSON SAFETY RULES ===
- Escape all quotes inside strings with backslash: \"
- Replace newlines in content with \n
- No trailing commas after last array/object item
- Use double quotes only, never single quotes
- No comments, no extra keys beyond schema"""

    @classmethod
    def entry_types(cls) -> List[str]:
        """Return the taxonomy of valid entry types."""
        return list(cls.ENTRY_TYPES)

    @classmethod
    def build(cls, chunk_text: str) -> str:
        """
        Build the classification prompt for one chunk.

        Args:
            chunk_text: Normalized chunk text

        Returns:
            Formatted user prompt string
        """
        schemas = "\n".join(f"{name}: {schema}" for name, schema in cls.METADATA_SCHEMAS.items())

        return f"""=== METADATA SCHEMAS BY TYPE ===
{schemas}

{cls.EXAMPLES}

{cls.JSON_RULES}

=== YOUR TASK ===
Classify this chunk into valid JSON matching the schema above.

Chunk:
<<<
{chunk_text}
>>>

RESPOND WITH ONLY THE JSON OBJECT. No markdown. No explanation. No fences."""
