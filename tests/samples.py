"""Sample composition files as exported by the authoring tool."""

from __future__ import annotations

import zipfile
from pathlib import Path

PRETTY_EDGE_JS = """\
/**
 * Adobe Edge: symbol definitions
 */
(function($, Edge, compId){
//images folder
var im='images/';

var fonts = {};


var resources = [
];
var symbols = {
"stage": {
   version: "0.1.7",
   minimumCompatibleVersion: "0.1.7",
   build: "0.11.0.186",
   baseState: "Base State",
   initialState: "Base State",
   gpuAccelerate: false,
   resizeInstances: false,
   content: {
         dom: [
         {
            id:'bg',
            type:'image',
            rect:['0px','0px','600px','280px','auto','auto'],
            fill:["rgba(0,0,0,0)",im+"bg.png",'0px','0px']
         }],
         symbolInstances: [

         ]
      },
   states: {
      "Base State": {
         "${_Stage}": [
            ["color", "background-color", 'rgba(255,255,255,1)'],
            ["style", "overflow", 'hidden'],
            ["style", "height", '280px'],
            ["style", "width", '600px']
         ],
         "${_bg}": [
            ["style", "height", '999px'],
            ["style", "width", '999px']
         ]
      }
   },
   timelines: {
      "Default Timeline": {
         fromState: "Base State",
         toState: "",
         duration: 0,
         autoPlay: true,
         timeline: [
         ]
      }
   }
}
};


Edge.registerCompositionDefn(compId, symbols, fonts, resources);

/**
 * Adobe Edge DOM Ready Event Handler
 */
$(window).ready(function() {
     Edge.launchComposition(compId);
});
})(jQuery, AdobeEdge, "EDGE-2489594");
"""

MINIFIED_EDGE_JS = (
    "(function($,Edge,compId){var _=null,y=true,n=false,x1='1.0.0',e5='${_bg}',"
    "g7='${_Stage}',h='height',w='width',bG='background-color',p='px';"
    "var im='images/',aud='media/',vid='media/',js='js/',fonts={},opts={},resources=[],"
    "symbols={\"stage\":{v:x1,mv:x1,b:x1,bS:'Base State',iS:'Base State',gpu:n,rI:n,"
    "cn:{dom:[{id:'bg',t:'image',r:['0px','0px','550px','400px','auto','auto']}]},"
    "tt:[],s:{\"Base State\":{}}}};"
    "A.A.A(e5).P(w,999,_,_,p).P(h,999,_,_,p);"
    "A.A.A(g7).P(bG,'rgba(255,255,255,1)').P(h,400,_,_,p).P(w,80,_,_,\"%\")"
    ".P(mw,300,_,_,p).P(o,'hidden');"
    "Edge.registerCompositionDefn(compId,symbols,fonts,resources,opts);"
    "})(AdobeEdge.$,AdobeEdge,\"EDGE-11648970\");"
)

PRELOAD_JS = """\
/**
 * Adobe Edge Preloader
 */
(function(compId){var htFallbacks;
var preContent={dom:[]};
var dlContent={dom:[]};

   var aLoader = [
     { load: "edge_includes/jquery-1.7.1.min.js"},
     { load: "edge_includes/edge.0.5.4.min.js"},
     { load: "demo_edge.js"}];

   if(!window.edge_authoring_mode) {
      AdobeEdge.okToLaunchComposition(compId);
   }

   AdobeEdge.loadResources(aLoader, doDelayLoad);

})( "EDGE-2489594");
"""

COMPANION_HTML = """\
<!DOCTYPE html>
<html>
<head>
<!--Adobe Edge Runtime-->
    <script type="text/javascript" charset="utf-8" src="http://animate.adobe.com/runtime/1.5.0/edge.1.5.0.min.js"></script>
    <script type="text/javascript" charset="utf-8" src="demo_edgePreload.js"></script>
<!--Adobe Edge Runtime End-->
</head>
<body style="margin:0;padding:0;">
    <div id="Stage" class="EDGE-2489594"></div>
</body>
</html>
"""


def make_archive(path: Path, files: dict[str, str | bytes]) -> Path:
    """Write a zip archive containing ``files`` (name -> content)."""
    with zipfile.ZipFile(path, "w") as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return path
