"""
Ingestion layer: provider clients and the schema validation boundary.

Submodules:
  primary_client  dofusdu.de Dofus 3 almanax window (fatal on failure)
  image_resolver  dofusdu.de Dofus 2 item images (soft on failure)
  validation      raw JSON → typed records, ``ValidationFailure`` on drift

Both providers are public: no credentials are required.
"""
