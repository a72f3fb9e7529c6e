"""Services used by the branch cleaner: git access, classification, deletion and display."""
