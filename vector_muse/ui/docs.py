"""Documentation tab content (How it works)."""

import streamlit as st

import config


def render_methodology_tab() -> None:
    """Render the How It Works explanation tab."""
    st.markdown(f"""
## How Vector-Muse Works

### Embeddings: Words as Points

Every word or sentence is sent to an embedding model, which returns a vector of
several hundred numbers ({config.HF_EMBEDDING_DIM} for `{config.HF_MODEL}`,
{config.OPENAI_EMBEDDING_DIM} for `{config.OPENAI_MODEL}`). Texts with similar
meaning get vectors that point in similar directions.

All texts of a view are requested at once. If a single request fails, the whole
batch is dropped and nothing is drawn, so a plot never mixes old and new words.

### PCA: Finding the Three Main Directions

To see the batch we keep only its **three directions of largest variance**
(principal component analysis):

1. Subtract the batch mean from every vector
2. Compute the covariance of the centered vectors
3. Take the eigenvectors with the largest eigenvalues as the new axes
4. Project each vector onto those axes

With a handful of words and hundreds of dimensions, the small n × n Gram matrix
is decomposed instead of the full covariance. The result is the same.

If the words span fewer than three independent directions (for example, only two
words), the missing axes are fixed at 0 and you will see a notice.

### Color: Position You Can See

The three projected axes become **red, green and blue**. Each axis is stretched
so the batch fills the full 0–255 range. An axis on which all words agree sits
at the midpoint (127).

### Sound: Position You Can Hear

Dragging a word turns its screen position into a tone:

```
frequency = {config.FREQ_BASE_HZ:.0f} Hz + x_ratio × {config.FREQ_SPAN_HZ:.0f} Hz
gain      = {config.GAIN_BASE} - y_ratio × {config.GAIN_SLOPE}   (clamped to 0..1)
```

A drag starts at a pitch set by the word's red channel. Only one tone sounds at
a time; grabbing another word silences the first.

### Analogies: Arithmetic on Meaning

`king + woman - man` adds and subtracts the word vectors. Candidate words are
ranked by **cosine similarity** to the result:

```
similarity = (a · b) / (|a| |b|)
```

- **1.0** = same direction
- **0** = unrelated
- **-1.0** = opposite

The query words themselves are left out of the ranking.

### Context Changes Meaning

Sentence embeddings encode the whole sentence. The explorer puts one word into
many sentences. The morphing playground swaps the words right before a fixed
word. Both show how much the surrounding words move the point.
""")
