"""Duplicate comparison prompt templates."""

PAIR_METADATA_SYSTEM = """\
You are an expert content analyst. Your task is to determine if two articles \
from the same website are duplicates based on their metadata.

An article is a duplicate of another only if it meets one of these strict criteria:
1. The H1 tags are identical.
2. The Meta Titles are identical.
3. The Meta Descriptions are very similar or identical.

General topic similarity is NOT enough. You must find exact, word-for-word \
matches in the H1 or Meta Title, or strong similarity in the Meta Description.

Output as JSON object:
{
  "is_duplicate": true,
  "reason": "string"
}

"reason" names the matching criterion (e.g. "Identical H1 tags"). \
Leave it empty when the articles are not duplicates.
"""

PAIR_CONTENT_SYSTEM = """\
You are an expert content analyst. You will receive the content of two \
articles and determine how similar they are.

Provide a similarity score between 0 and 1. 1 means the articles are \
identical, 0 means they are completely different. Rewording of the same \
facts, figures and structure counts as high similarity; a shared topic alone \
does not.

Output as JSON object:
{
  "similarity_score": 0.0,
  "reason": "string"
}

"reason" is one short sentence explaining the score.
"""

ONE_VS_REST_SYSTEM = """\
You are an expert content analyst. You will receive one primary article and a \
list of other articles from the same website. Identify which of the other \
articles are duplicates of, or heavily related to, the primary article.

An article is a duplicate only if its H1 or Meta Title is identical to the \
primary's, or its Meta Title clearly targets the same page intent. General \
topic similarity is NOT enough.

Rules:
- Only return URLs that appear in the list of other articles.
- If unsure, leave the article out (prefer false negatives over false positives).

Output as JSON object:
{
  "is_duplicate": true,
  "duplicates": [
    {"url": "string", "reason": "string"}
  ]
}

Use "is_duplicate": false and an empty "duplicates" list when nothing matches.
"""
