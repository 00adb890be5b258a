"""Gradio UI for UMKM GenAI Studio."""
