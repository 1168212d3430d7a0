"""CSV question answering: summarizer, prompt composer, provider adapter."""
