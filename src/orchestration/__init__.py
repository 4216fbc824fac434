"""
Orchestration Layer - Workflow Coordination

This layer coordinates the assessment workflow.
- Pure workflow coordination
- No scoring logic
- Composes extract, transform, and load operations
"""
