from seo_bootstrap.pipeline import main

main()
