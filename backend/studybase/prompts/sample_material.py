"""Sample study material used to seed a knowledge base without a PDF."""

SAMPLE_MATERIAL = """
# Sample: Articulate Verbiage

Clarity Is a Force Multiplier — Clear writing and clear thinking reinforce each other. When language is precise, decisions accelerate and teams align faster.

Signal-to-Noise Principle — The more irrelevant input you accept, the slower you act. Design workflows that discard noise early to preserve momentum.

"Style is the answer to everything." — Charles Bukowski. A reminder that presentation can clarify intent even when the idea is complex.

Example: The One-Sentence Memo — If you can summarize a project in one sentence, the team can remember it. If you cannot, the scope is unclear.

Procedure: Two-Pass Revision — Pass one: remove filler words and clichés. Pass two: replace vague nouns with concrete nouns and verbs.

Question: What is the shortest possible statement that still preserves the full meaning of the idea?

Connection: Good API design feels like good prose — predictable structure lowers cognitive load for both readers and users.

Note: When a paragraph feels heavy, split it into two and let the second begin with a verb.

Reference: "The Elements of Style" by Strunk and White — classic rules for tighter, clearer sentences.

Principle: Favor strong verbs over adverbs — adverbs often hide weak verb choices and blur meaning.

Concept: Verbiage Debt — the hidden cost of bloated language that slows collaboration and execution.

Quote: "If it is possible to cut a word out, always cut it out." — George Orwell.
"""
