"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.
"""

APP_CSS = """
/* ============================================
   Main Screen Layout
   ============================================ */
Screen {
    layout: vertical;
    background: $background;
}

#main-row {
    height: 1fr;
}

/* ============================================
   Chat History Panel
   ============================================ */
#chat-history {
    width: 1fr;
    height: 100%;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus {
        border: round $primary;
    }
}

.chat-message {
    height: auto;
    margin: 0 0 1 0;
    padding: 0 1;
    border-left: wide $surface;
}

.user-message {
    border-left: wide $warning;
}

.assistant-message {
    border-left: wide $success;
}

.message-header {
    height: auto;
    text-style: bold;
}

.message-content {
    height: auto;
}

.chat-notice {
    height: auto;
    margin: 0 0 1 0;
    padding: 0 1;
}

/* ============================================
   Metrics Panel
   ============================================ */
#metrics {
    width: 28;
    height: 100%;
    background: $panel;
    border: round $secondary 60%;
    border-title-color: $secondary;
    border-title-style: bold;
    padding: 0 1;
}

/* ============================================
   Trace Log Panel (hidden by default)
   ============================================ */
#debug-panel {
    height: 10;
    background: $panel;
    border: round $accent 60%;
    border-title-color: $accent;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
}

/* ============================================
   Input Row
   ============================================ */
#input-row {
    height: 3;
}

#chat-input-bar {
    width: 1fr;
    height: 3;
}

#input-prompt {
    width: 2;
    height: 3;
    content-align: left middle;
    color: $accent;
}

#chat-input {
    width: 1fr;
    border: tall $border;

    &:focus {
        border: tall $primary;
    }

    &:disabled {
        opacity: 60%;
    }
}

#mode-indicator {
    width: 22;
    height: 3;
    content-align: right middle;
    padding: 0 1;
}

/* ============================================
   Key Hints
   ============================================ */
#key-hints {
    height: 5;
    padding: 0 1;
    color: $text-muted;
}
"""
