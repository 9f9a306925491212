"""Core state, actions and routing; nothing here depends on Textual."""
