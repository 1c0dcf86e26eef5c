"""
onview.art OG image service

- Resolves ENS names (og_image.ens) and fetches up to six token previews from
  the Art Blocks GraphQL API (og_image.artblocks)
- Renders a 1200x630 PNG card (og_image.composer) through og_image.handler
- Serves /{address}/opengraph-image via FastAPI (og_image.server)
"""
