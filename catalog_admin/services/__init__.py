"""
Couche application (services).

- reconciler : Encodage des soumissions et decodage des documents
- mirror : Miroirs locaux des collections, remplaces a chaque snapshot
- mutations : Creation, suppression (simple et groupee), ajout d'episode
- wizard : Assistant de soumission en deux etapes
- admin_console : Actions de la console d'administration
"""
