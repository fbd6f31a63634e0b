"""Suite source adapters (the discovery collaborator).

- Modules (imports suite modules and builds their banks)
"""
