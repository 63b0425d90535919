# TaskFlow board client: board state, reconciliation and derived views
#
# Components:
#   schema.py   - Data model (Board, Column, Task, Subtask, TaskPriority) and payloads
#   reorder.py  - Pure reordering and local mutation functions
#   state.py    - Immutable BoardState and its reducers
#   api.py      - requests-based REST client
#   store.py    - BoardStore: mutations + reconciliation by refetch
#   filters.py  - Search / priority filter / sort views
#   forms.py    - Task, column and auth form validation
#   auth.py     - Login, registration and persisted session
#   dnd.py      - Drag-and-drop to store call translation
#   render.py   - Plain-text board rendering
#   config.py   - YAML configuration
