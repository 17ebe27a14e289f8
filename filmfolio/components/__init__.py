"""Components layer - domain logic building blocks.

Components are leaf modules that:
- Do NOT import services, workflows, or interfaces
- ARE imported and used BY workflows and services
- May import from: helpers, persistence, other components

Architecture:
- helpers/ = stdlib-only utilities (pure, stateless)
- persistence/ = atomic JSON documents
- components/ = domain logic building blocks (this layer)
- services/ = DI, wiring, long-lived resources
- workflows/ = multi-step protocols spanning services
- interfaces/ = HTTP presentation
"""
